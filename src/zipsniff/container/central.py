# topmark:header:start
#
#   project      : ZipSniff
#   file         : central.py
#   file_relpath : src/zipsniff/container/central.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Central-directory resolution for random-access inputs.

When the input is seekable there is no need to scan local headers: the end
of central directory record at the tail of the file points at the complete
entry list, with reliable sizes even for entries written with data
descriptors. `SeekableDeepResolver` walks that list, classifies every name
and only touches entry data for the few entries a content rule cares about.

The walk is bounded by ``max_entries`` regardless of what the (possibly
adversarial) end record claims.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.container.fragments import decode_fragment, is_decodable
from zipsniff.container.records import (
    SIG_CENTRAL,
    find_end_of_central_directory,
    locate_local_data,
    read_central_header,
)
from zipsniff.errors import MalformedContainerError, UnsupportedCompressionError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from zipsniff.catalog.catalog import SignatureCatalog
    from zipsniff.config.model import DetectorConfig
    from zipsniff.container.records import EndOfCentralDirectory, EntryDescriptor
    from zipsniff.detection.context import DetectionContext
    from zipsniff.io.handles import SeekableInput

logger: ZipsniffLogger = get_logger(__name__)


class SeekableDeepResolver:
    """Classifies a seekable container through its central directory.

    Args:
        handle (SeekableInput): Random-access input.
        catalog (SignatureCatalog): Rule catalog.
        config (DetectorConfig): Entry budget and decode ceilings.
    """

    def __init__(
        self,
        handle: SeekableInput,
        catalog: SignatureCatalog,
        config: DetectorConfig,
    ) -> None:
        self._handle: SeekableInput = handle
        self._catalog: SignatureCatalog = catalog
        self._config: DetectorConfig = config

    def locate(self) -> EndOfCentralDirectory | None:
        """Return the end of central directory record, or ``None`` if there is none.

        Raises:
            MalformedContainerError: If the record points outside the input.
        """
        eocd: EndOfCentralDirectory | None = find_end_of_central_directory(self._handle)
        if eocd is None:
            logger.debug("No end of central directory record found")
            return None
        if eocd.cd_offset > eocd.offset:
            raise MalformedContainerError(
                f"Central directory offset {eocd.cd_offset} lies past its end record",
                offset=eocd.offset,
            )
        logger.trace(
            "Central directory at %d: %d entries, %d bytes%s",
            eocd.cd_offset,
            eocd.entry_count,
            eocd.cd_size,
            " (zip64)" if eocd.zip64 else "",
        )
        return eocd

    def entries(self, eocd: EndOfCentralDirectory) -> Iterator[EntryDescriptor]:
        """Yield central directory entries, at most ``max_entries`` of them.

        The walk ends at the first record that is not a central directory header
        or that would start at or after the end record.
        """
        handle: SeekableInput = self._handle
        position: int = eocd.cd_offset
        count = 0
        while count < self._config.max_entries and position < eocd.offset:
            if handle.read_at(position, 4) != SIG_CENTRAL:
                break
            handle.seek(position)
            entry: EntryDescriptor = read_central_header(handle)
            position = handle.tell()
            count += 1
            yield entry

    def _fragment(self, entry: EntryDescriptor) -> bytes | None:
        """Decode the leading bytes of ``entry`` from its local data."""
        if not is_decodable(entry, self._config):
            return None
        handle: SeekableInput = self._handle
        data_offset: int = locate_local_data(handle, entry)
        data: bytes = handle.read_at(data_offset, entry.compressed_size)
        if len(data) < entry.compressed_size:
            logger.debug("Entry data of %s is truncated", entry.name)
            return None
        try:
            return decode_fragment(data, entry.method, self._config.fragment_size)
        except UnsupportedCompressionError as exc:
            logger.debug("Skipping content of %s: %s", entry.name, exc)
            return None

    def resolve(self, context: DetectionContext) -> bool:
        """Classify every central directory entry into ``context``.

        Stops at the first definitive match or after ``max_entries`` entries.

        Args:
            context (DetectionContext): Per-call accumulator.

        Returns:
            bool: False if no central directory could be located (the caller then
                falls back to a sequential scan), True otherwise.

        Raises:
            MalformedContainerError: If a central directory or local header is corrupt.
        """
        eocd: EndOfCentralDirectory | None = self.locate()
        if eocd is None:
            return False
        for entry in self.entries(eocd):
            fragment: bytes | None = None
            if self._catalog.wants_content(entry.name):
                fragment = self._fragment(entry)
            context.bytes_consumed = max(context.bytes_consumed, self._handle.tell())
            context.inspect(self._catalog, entry.name, fragment)
            if context.definitive:
                logger.debug("Definitive match on %s", entry.name)
                break
        return True
