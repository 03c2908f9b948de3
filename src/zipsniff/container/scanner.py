# topmark:header:start
#
#   project      : ZipSniff
#   file         : scanner.py
#   file_relpath : src/zipsniff/container/scanner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Bounded, sequential enumeration of ZIP local file headers.

`BoundedEntryScanner` walks the local headers from the handle's current
position and yields one `ScannedEntry` per entry, lazily and in container
order. It never reads past the byte budget (the configured mark limit): an
entry whose header does not fit inside the budget is never inspected.

Running out of budget, reaching the central directory, or hitting the end of
the input are normal terminations ("exhausted"); the reason is exposed as
`BoundedEntryScanner.stop_reason`. Structurally broken local headers raise
`zipsniff.errors.MalformedContainerError`.

The scanner stops before reading the next entry once the caller marked the
`zipsniff.detection.context.DetectionContext` as definitive.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.container.fragments import (
    StreamEnd,
    decode_fragment,
    inflate_to_end,
    is_decodable,
    scan_to_descriptor,
)
from zipsniff.container.records import (
    LOCAL_HEADER_SIZE,
    METHOD_DEFLATED,
    METHOD_STORED,
    SIG_DATA_DESCRIPTOR,
    SIG_LOCAL,
    TRAILING_SIGNATURES,
    local_header_length,
    read_local_header,
)
from zipsniff.errors import MalformedContainerError, UnsupportedCompressionError
from zipsniff.io.handles import BoundedPrefixBuffer

if TYPE_CHECKING:
    from collections.abc import Iterator

    from zipsniff.catalog.catalog import SignatureCatalog
    from zipsniff.config.model import DetectorConfig
    from zipsniff.container.records import EntryDescriptor
    from zipsniff.detection.context import DetectionContext
    from zipsniff.io.handles import InputHandle

logger: ZipsniffLogger = get_logger(__name__)


class StopReason(Enum):
    """Why a scan ended.

    Attributes:
        DEFINITIVE: The caller recorded a definitive match.
        MARK_LIMIT: The next record does not fit inside the byte budget.
        MAX_ENTRIES: The entry budget is spent.
        END_OF_INPUT: The input ended (at a record boundary or inside entry data).
        CENTRAL_DIRECTORY: A central directory or end record follows the entries.
        DECODE_CEILING: Data of unknown length outgrew the decode ceilings.
    """

    DEFINITIVE = "definitive"
    MARK_LIMIT = "mark_limit"
    MAX_ENTRIES = "max_entries"
    END_OF_INPUT = "end_of_input"
    CENTRAL_DIRECTORY = "central_directory"
    DECODE_CEILING = "decode_ceiling"


@dataclass(frozen=True)
class ScannedEntry:
    """An entry header paired with its decoded leading bytes, if any.

    Attributes:
        descriptor (EntryDescriptor): The entry header.
        fragment (bytes | None): Leading decoded content; only set when the catalog
            has a content rule for the entry name and decoding was allowed.
    """

    descriptor: EntryDescriptor
    fragment: bytes | None = None


class BoundedEntryScanner:
    """Sequential local-header scanner with a byte budget.

    Args:
        handle (InputHandle): Input positioned at the first local header.
        catalog (SignatureCatalog): Consulted to decide which entries need content.
        config (DetectorConfig): Budgets and decode ceilings.
    """

    def __init__(
        self,
        handle: InputHandle,
        catalog: SignatureCatalog,
        config: DetectorConfig,
    ) -> None:
        self._handle: InputHandle = handle
        self._catalog: SignatureCatalog = catalog
        self._config: DetectorConfig = config
        budget: int = config.mark_limit
        if isinstance(handle, BoundedPrefixBuffer):
            budget = min(budget, handle.mark_limit)
        self._budget: int = budget
        self.stop_reason: StopReason | None = None

    @property
    def budget(self) -> int:
        """Absolute input position the scan never reads past."""
        return self._budget

    def _room(self) -> int:
        return self._budget - self._handle.tell()

    def _stop(self, reason: StopReason) -> None:
        self.stop_reason = reason
        logger.debug("Scan stopped at offset %d: %s", self._handle.tell(), reason.value)

    def scan(self, context: DetectionContext) -> Iterator[ScannedEntry]:
        """Yield entries in container order until exhausted.

        Args:
            context (DetectionContext): Per-call state; ``definitive`` is checked
                before each entry and ``bytes_consumed`` is kept up to date.

        Yields:
            ScannedEntry: One item per local header.

        Raises:
            MalformedContainerError: On an unexpected signature or a truncated header.
        """
        handle: InputHandle = self._handle
        self.stop_reason = None
        while True:
            context.bytes_consumed = max(context.bytes_consumed, handle.tell())
            if context.definitive:
                self._stop(StopReason.DEFINITIVE)
                return
            if context.entries_seen >= self._config.max_entries:
                self._stop(StopReason.MAX_ENTRIES)
                return

            room: int = self._room()
            sig: bytes = handle.peek(min(4, max(room, 0)))
            if len(sig) < 4:
                if room < 4:
                    self._stop(StopReason.MARK_LIMIT)
                    return
                if sig:
                    raise MalformedContainerError(
                        "Truncated record signature", offset=handle.tell()
                    )
                self._stop(StopReason.END_OF_INPUT)
                return
            if sig in TRAILING_SIGNATURES:
                self._stop(StopReason.CENTRAL_DIRECTORY)
                return
            if sig != SIG_LOCAL:
                raise MalformedContainerError(
                    f"Unexpected record signature {sig!r}", offset=handle.tell()
                )

            if room < LOCAL_HEADER_SIZE:
                self._stop(StopReason.MARK_LIMIT)
                return
            fixed: bytes = handle.peek(LOCAL_HEADER_SIZE)
            if len(fixed) < LOCAL_HEADER_SIZE:
                raise MalformedContainerError("Truncated local file header", offset=handle.tell())
            if local_header_length(fixed) > room:
                self._stop(StopReason.MARK_LIMIT)
                return

            entry: EntryDescriptor = read_local_header(handle)
            logger.trace(
                "Local header %s at %d (method %d, %d bytes)",
                entry.name,
                entry.offset,
                entry.method,
                entry.compressed_size,
            )
            fragment, stop = self._consume_data(entry)
            context.bytes_consumed = max(context.bytes_consumed, handle.tell())
            yield ScannedEntry(entry, fragment)
            if stop is not None:
                self._stop(stop)
                return

    def _consume_data(self, entry: EntryDescriptor) -> tuple[bytes | None, StopReason | None]:
        """Consume the entry data (and data descriptor), decoding a fragment if wanted.

        Returns:
            tuple[bytes | None, StopReason | None]: The fragment, and a stop reason when
                the scan cannot continue past this entry.
        """
        want: bool = self._catalog.wants_content(entry.name) and is_decodable(entry, self._config)

        if entry.has_data_descriptor and entry.compressed_size == 0:
            return self._consume_undelimited(entry, want)

        size: int = entry.compressed_size
        if size > self._room():
            # Entry data crosses the budget: the name is still usable.
            return None, StopReason.MARK_LIMIT

        fragment: bytes | None = None
        if want:
            data: bytes = self._handle.read(size)
            if len(data) < size:
                return None, StopReason.END_OF_INPUT
            try:
                fragment = decode_fragment(data, entry.method, self._config.fragment_size)
            except UnsupportedCompressionError as exc:
                logger.debug("Skipping content of %s: %s", entry.name, exc)
        elif self._handle.skip(size) < size:
            return None, StopReason.END_OF_INPUT

        if entry.has_data_descriptor:
            return fragment, self._skip_data_descriptor(entry)
        return fragment, None

    def _consume_undelimited(
        self, entry: EntryDescriptor, want: bool
    ) -> tuple[bytes | None, StopReason | None]:
        """Consume data whose size only follows in the data descriptor.

        Readable deflate streams are inflated to their end; anything else is
        delimited by its signed data descriptor.
        """
        handle: InputHandle = self._handle
        ceiling: int = self._config.max_marker_compressed_size
        capture: int = self._config.fragment_size if want else 0
        start: int = handle.tell()
        if entry.method == METHOD_DEFLATED and not entry.is_encrypted:
            captured, end = inflate_to_end(
                handle, budget=self._budget, capture=capture, max_input=ceiling
            )
        else:
            stored: bool = entry.method == METHOD_STORED and not entry.is_encrypted
            captured, end = scan_to_descriptor(
                handle,
                budget=self._budget,
                zip64=entry.zip64,
                stored=stored,
                capture=capture if stored else 0,
            )

        if end is StreamEnd.CEILING:
            return None, StopReason.DECODE_CEILING
        fragment: bytes | None = captured if want else None
        if end is StreamEnd.EXHAUSTED:
            return fragment, self._exhaustion_reason()
        if handle.tell() - start > ceiling:
            logger.debug("Not using content of %s: above the decode ceiling", entry.name)
            fragment = None
        return fragment, self._skip_data_descriptor(entry)

    def _exhaustion_reason(self) -> StopReason:
        return StopReason.MARK_LIMIT if self._room() <= 0 else StopReason.END_OF_INPUT

    def _skip_data_descriptor(self, entry: EntryDescriptor) -> StopReason | None:
        """Skip a data descriptor: optional signature, CRC-32, then 32- or 64-bit sizes."""
        length: int = 4 + (16 if entry.zip64 else 8)
        if self._handle.peek(4) == SIG_DATA_DESCRIPTOR:
            length += 4
        if length > self._room():
            return StopReason.MARK_LIMIT
        if self._handle.skip(length) < length:
            return StopReason.END_OF_INPUT
        return None
