# topmark:header:start
#
#   project      : ZipSniff
#   file         : fragments.py
#   file_relpath : src/zipsniff/container/fragments.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Bounded decoding of small identifying entry payloads.

Only STORED and DEFLATED entries are decoded, and never more than
``fragment_size`` output bytes: a marker such as ``mimetype`` or
``[Content_Types].xml`` is all that is needed for classification.

Entries whose sizes are deferred to a data descriptor have no known length
while streaming. `inflate_to_end` and `scan_to_descriptor` find where their
data ends, under the same compressed-size ceiling as marker decoding.
"""

from __future__ import annotations

import struct
import zlib
from enum import Enum
from typing import TYPE_CHECKING, Final

from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.constants import CHUNK_SIZE, MAX_INFLATE_RATIO
from zipsniff.container.records import METHOD_DEFLATED, METHOD_STORED, SIG_DATA_DESCRIPTOR
from zipsniff.errors import MalformedContainerError, UnsupportedCompressionError

if TYPE_CHECKING:
    from zipsniff.config.model import DetectorConfig
    from zipsniff.container.records import EntryDescriptor
    from zipsniff.io.handles import InputHandle

logger: ZipsniffLogger = get_logger(__name__)

SUPPORTED_METHODS: Final[frozenset[int]] = frozenset({METHOD_STORED, METHOD_DEFLATED})

# Raw deflate stream, no zlib header.
_RAW_DEFLATE_WBITS: Final[int] = -zlib.MAX_WBITS

# Signed data descriptor: signature, CRC-32, compressed and uncompressed size.
_DESCRIPTOR_32: Final[struct.Struct] = struct.Struct("<4sIII")
_DESCRIPTOR_64: Final[struct.Struct] = struct.Struct("<4sIQQ")


def is_decodable(entry: EntryDescriptor, config: DetectorConfig) -> bool:
    """Return True if ``entry``'s payload may be decoded for a content rule.

    Encrypted entries, unsupported methods and entries whose compressed size
    exceeds ``config.max_marker_compressed_size`` are never decoded.
    """
    if entry.is_encrypted:
        logger.trace("Not decoding %s: encrypted", entry.name)
        return False
    if entry.method not in SUPPORTED_METHODS:
        logger.debug("Not decoding %s: compression method %d", entry.name, entry.method)
        return False
    if entry.compressed_size > config.max_marker_compressed_size:
        logger.debug(
            "Not decoding %s: %d compressed bytes exceed the %d byte ceiling",
            entry.name,
            entry.compressed_size,
            config.max_marker_compressed_size,
        )
        return False
    return True


def decode_fragment(data: bytes, method: int, limit: int) -> bytes | None:
    """Decode at most ``limit`` bytes of an entry payload.

    Args:
        data (bytes): The entry's compressed bytes.
        method (int): Compression method.
        limit (int): Maximum number of decoded bytes to return.

    Returns:
        bytes | None: The decoded prefix, or ``None`` if the deflate stream is corrupt.

    Raises:
        UnsupportedCompressionError: If ``method`` is neither STORED nor DEFLATED.
    """
    if method == METHOD_STORED:
        return data[:limit]
    if method != METHOD_DEFLATED:
        raise UnsupportedCompressionError(method)
    inflater = zlib.decompressobj(_RAW_DEFLATE_WBITS)
    try:
        return inflater.decompress(data, limit)
    except zlib.error as exc:
        logger.debug("Corrupt deflate data: %s", exc)
        return None


class StreamEnd(Enum):
    """How consuming entry data of unknown length ended.

    Attributes:
        COMPLETE: The end of the data was found; the handle is positioned on it.
        EXHAUSTED: The byte budget or the input ran out first.
        CEILING: A decode ceiling was hit; the handle position is unspecified.
    """

    COMPLETE = "complete"
    EXHAUSTED = "exhausted"
    CEILING = "ceiling"


def inflate_to_end(
    handle: InputHandle,
    *,
    budget: int,
    capture: int = 0,
    max_input: int | None = None,
) -> tuple[bytes, StreamEnd]:
    """Consume one raw deflate stream of unknown length from ``handle``.

    Used for entries whose sizes are deferred to a trailing data descriptor:
    the only way to find where the data ends is to inflate it. Input is peeked
    in chunks and only the bytes belonging to the deflate stream are consumed,
    so the handle ends up positioned right after the compressed data.

    Inflating stops with `StreamEnd.CEILING` once more than ``max_input``
    compressed bytes were fed, or once the output outgrows
    `MAX_INFLATE_RATIO` times the input (input below `CHUNK_SIZE` counts as
    `CHUNK_SIZE`).

    Args:
        handle (InputHandle): Input positioned at the start of the entry data.
        budget (int): Absolute position the handle must not read past.
        capture (int): Number of leading decoded bytes to return.
        max_input (int | None): Maximum number of compressed bytes to inflate.

    Returns:
        tuple[bytes, StreamEnd]: The captured bytes and how the stream ended.

    Raises:
        MalformedContainerError: If the data is not a valid deflate stream.
    """
    start: int = handle.tell()
    limit: int = budget if max_input is None else min(budget, start + max_input)
    inflater = zlib.decompressobj(_RAW_DEFLATE_WBITS)
    captured = bytearray()
    produced = 0
    while not inflater.eof:
        room: int = limit - handle.tell()
        if room <= 0:
            if limit < budget:
                logger.debug("Deflate stream at %d exceeds %d compressed bytes", start, max_input)
                return bytes(captured), StreamEnd.CEILING
            return bytes(captured), StreamEnd.EXHAUSTED
        chunk: bytes = handle.peek(min(CHUNK_SIZE, room))
        if not chunk:
            return bytes(captured), StreamEnd.EXHAUSTED
        pending: bytes = chunk
        try:
            while pending and not inflater.eof:
                out: bytes = inflater.decompress(pending, CHUNK_SIZE)
                produced += len(out)
                if len(captured) < capture:
                    captured += out[: capture - len(captured)]
                pending = inflater.unconsumed_tail
                fed: int = handle.tell() - start + len(chunk) - len(pending)
                if produced > MAX_INFLATE_RATIO * max(fed, CHUNK_SIZE):
                    logger.debug(
                        "Deflate stream at %d expands past %d:1 (%d -> %d bytes)",
                        start,
                        MAX_INFLATE_RATIO,
                        fed,
                        produced,
                    )
                    return bytes(captured), StreamEnd.CEILING
        except zlib.error as exc:
            raise MalformedContainerError(
                f"Corrupt deflate stream: {exc}", offset=handle.tell()
            ) from exc
        used: int = len(chunk) - len(inflater.unused_data) if inflater.eof else len(chunk)
        handle.skip(used)
    return bytes(captured), StreamEnd.COMPLETE


def scan_to_descriptor(
    handle: InputHandle,
    *,
    budget: int,
    zip64: bool = False,
    stored: bool = False,
    capture: int = 0,
) -> tuple[bytes, StreamEnd]:
    """Consume entry data of unknown length up to its signed data descriptor.

    A ``PK\\x07\\x08`` signature inside the data is only accepted as the end
    when the compressed size it records equals the number of bytes seen so
    far. For STORED data (``stored=True``) the uncompressed size and the
    CRC-32 must match as well. Descriptors written without the signature
    cannot be found and exhaust the budget.

    Args:
        handle (InputHandle): Input positioned at the start of the entry data.
        budget (int): Absolute position the handle must not read past.
        zip64 (bool): Whether the descriptor carries 64-bit sizes.
        stored (bool): Whether the data is uncompressed and unencrypted.
        capture (int): Number of leading data bytes to return.

    Returns:
        tuple[bytes, StreamEnd]: The captured bytes and `StreamEnd.COMPLETE`
            (handle on the descriptor) or `StreamEnd.EXHAUSTED`.
    """
    layout: struct.Struct = _DESCRIPTOR_64 if zip64 else _DESCRIPTOR_32
    window: int = CHUNK_SIZE + layout.size - 1
    captured = bytearray()
    crc = 0
    seen = 0
    while True:
        chunk: bytes = handle.peek(max(min(window, budget - handle.tell()), 0))
        last: int = len(chunk) - layout.size
        pos: int = chunk.find(SIG_DATA_DESCRIPTOR)
        while 0 <= pos <= last:
            _sig, entry_crc, csize, usize = layout.unpack_from(chunk, pos)
            if csize == seen + pos and (
                not stored or (usize == csize and entry_crc == zlib.crc32(chunk[:pos], crc))
            ):
                captured += chunk[: min(pos, max(capture - len(captured), 0))]
                handle.skip(pos)
                return bytes(captured), StreamEnd.COMPLETE
            pos = chunk.find(SIG_DATA_DESCRIPTOR, pos + 1)
        if len(chunk) < window:
            captured += chunk[: max(capture - len(captured), 0)]
            return bytes(captured), StreamEnd.EXHAUSTED
        # Every candidate starting in the first CHUNK_SIZE bytes was checked.
        head: bytes = chunk[:CHUNK_SIZE]
        captured += head[: max(capture - len(captured), 0)]
        if stored:
            crc = zlib.crc32(head, crc)
        seen += CHUNK_SIZE
        handle.skip(CHUNK_SIZE)
