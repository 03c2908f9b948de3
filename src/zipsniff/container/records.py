# topmark:header:start
#
#   project      : ZipSniff
#   file         : records.py
#   file_relpath : src/zipsniff/container/records.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZIP record layouts and parsers.

Only the records needed for classification are decoded: local file headers
(streaming scan), central directory headers and the end-of-central-directory
records (seekable resolution), plus the ZIP64 extra field that carries 64-bit
sizes.

Record layouts (little-endian)::

    local file header      30 bytes + name + extra
    central dir header     46 bytes + name + extra + comment
    end of central dir     22 bytes + comment (<= 65535)
    zip64 eocd locator     20 bytes
    zip64 eocd record      56 bytes (+ extensible data)

All parsers raise `zipsniff.errors.MalformedContainerError` on truncated
records or unexpected signatures.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from zipsniff.errors import MalformedContainerError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from zipsniff.io.handles import InputHandle, SeekableInput

# ---- Signatures ----
SIG_LOCAL: Final[bytes] = b"PK\x03\x04"
SIG_CENTRAL: Final[bytes] = b"PK\x01\x02"
SIG_EOCD: Final[bytes] = b"PK\x05\x06"
SIG_ZIP64_EOCD: Final[bytes] = b"PK\x06\x06"
SIG_ZIP64_LOCATOR: Final[bytes] = b"PK\x06\x07"
SIG_DATA_DESCRIPTOR: Final[bytes] = b"PK\x07\x08"
SIG_DIGITAL_SIGNATURE: Final[bytes] = b"PK\x05\x05"
SIG_ARCHIVE_EXTRA: Final[bytes] = b"PK\x06\x08"

# Leading bytes that confirm a ZIP container: a first local header, or an empty archive.
ZIP_MAGICS: Final[tuple[bytes, ...]] = (SIG_LOCAL, SIG_EOCD)

# Records that legitimately end the run of local headers.
TRAILING_SIGNATURES: Final[frozenset[bytes]] = frozenset(
    {
        SIG_CENTRAL,
        SIG_EOCD,
        SIG_ZIP64_EOCD,
        SIG_ZIP64_LOCATOR,
        SIG_DIGITAL_SIGNATURE,
        SIG_ARCHIVE_EXTRA,
    }
)

# ---- Compression methods / flags ----
METHOD_STORED: Final[int] = 0
METHOD_DEFLATED: Final[int] = 8

FLAG_ENCRYPTED: Final[int] = 0x0001
FLAG_DATA_DESCRIPTOR: Final[int] = 0x0008
FLAG_UTF8: Final[int] = 0x0800

ZIP64_EXTRA_ID: Final[int] = 0x0001
ZIP64_MARKER_32: Final[int] = 0xFFFFFFFF

# ---- Fixed layouts ----
_LOCAL: Final[struct.Struct] = struct.Struct("<4sHHHHHIIIHH")
_CENTRAL: Final[struct.Struct] = struct.Struct("<4sHHHHHHIIIHHHHHII")
_EOCD: Final[struct.Struct] = struct.Struct("<4sHHHHIIH")
_ZIP64_LOCATOR: Final[struct.Struct] = struct.Struct("<4sIQI")
_ZIP64_EOCD: Final[struct.Struct] = struct.Struct("<4sQHHIIQQQQ")

LOCAL_HEADER_SIZE: Final[int] = _LOCAL.size  # 30
CENTRAL_HEADER_SIZE: Final[int] = _CENTRAL.size  # 46
EOCD_SIZE: Final[int] = _EOCD.size  # 22
ZIP64_LOCATOR_SIZE: Final[int] = _ZIP64_LOCATOR.size  # 20
ZIP64_EOCD_SIZE: Final[int] = _ZIP64_EOCD.size  # 56
MAX_COMMENT_SIZE: Final[int] = 0xFFFF


@dataclass(frozen=True)
class EntryDescriptor:
    """One entry of a ZIP container, as declared by its header.

    Attributes:
        name (str): Entry path, decoded from ``raw_name``.
        raw_name (bytes): Entry path exactly as stored.
        method (int): Compression method.
        flags (int): General-purpose bit flags.
        compressed_size (int): Declared compressed size (0 when deferred to a data descriptor).
        uncompressed_size (int): Declared uncompressed size.
        offset (int): Offset of the entry's local header within the container.
        data_offset (int | None): Offset of the entry data, when known.
        zip64 (bool): True if the header carried a ZIP64 extra field (data
            descriptors then hold 64-bit sizes).
    """

    name: str
    raw_name: bytes
    method: int
    flags: int
    compressed_size: int
    uncompressed_size: int
    offset: int
    data_offset: int | None = None
    zip64: bool = False

    @property
    def is_encrypted(self) -> bool:
        """True if the entry data is encrypted."""
        return bool(self.flags & FLAG_ENCRYPTED)

    @property
    def has_data_descriptor(self) -> bool:
        """True if sizes follow the data in a data descriptor."""
        return bool(self.flags & FLAG_DATA_DESCRIPTOR)


@dataclass(frozen=True)
class EndOfCentralDirectory:
    """Location and size of the central directory.

    Attributes:
        offset (int): Offset of the EOCD record.
        entry_count (int): Total number of central directory entries.
        cd_size (int): Size of the central directory in bytes.
        cd_offset (int): Offset of the first central directory header.
        comment_length (int): Length of the archive comment.
        zip64 (bool): True if the values came from a ZIP64 EOCD record.
    """

    offset: int
    entry_count: int
    cd_size: int
    cd_offset: int
    comment_length: int = 0
    zip64: bool = False


def decode_name(raw: bytes, flags: int) -> str:
    """Decode an entry name.

    Names flagged as UTF-8 and names that happen to be valid UTF-8 are decoded
    as such; anything else falls back to the ZIP default code page (cp437).
    """
    if flags & FLAG_UTF8:
        return raw.decode("utf-8", "replace")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("cp437")


def iter_extra_fields(extra: bytes) -> Iterator[tuple[int, bytes]]:
    """Yield ``(header_id, data)`` pairs; a truncated trailing field is ignored."""
    i = 0
    size: int = len(extra)
    while i + 4 <= size:
        header_id, length = struct.unpack_from("<HH", extra, i)
        i += 4
        if i + length > size:
            break
        yield header_id, extra[i : i + length]
        i += length


def apply_zip64_extra(
    extra: bytes,
    *,
    uncompressed_size: int,
    compressed_size: int,
    offset: int = 0,
) -> tuple[int, int, int]:
    """Replace 32-bit placeholder values with those of the ZIP64 extra field.

    The ZIP64 extra field lists, in this order, only the values whose header
    field holds the ``0xFFFFFFFF`` marker: uncompressed size, compressed size,
    local header offset.

    Args:
        extra (bytes): The record's extra field.
        uncompressed_size (int): Header value.
        compressed_size (int): Header value.
        offset (int): Header value (central directory only).

    Returns:
        tuple[int, int, int]: ``(uncompressed_size, compressed_size, offset)``.

    Raises:
        MalformedContainerError: If a marker is set but the extra field is too short.
    """
    wanted: list[int] = [uncompressed_size, compressed_size, offset]
    if ZIP64_MARKER_32 not in wanted:
        return uncompressed_size, compressed_size, offset
    for header_id, data in iter_extra_fields(extra):
        if header_id != ZIP64_EXTRA_ID:
            continue
        pos = 0
        for idx, value in enumerate(wanted):
            if value != ZIP64_MARKER_32:
                continue
            if pos + 8 > len(data):
                raise MalformedContainerError("ZIP64 extra field too short")
            wanted[idx] = struct.unpack_from("<Q", data, pos)[0]
            pos += 8
        return wanted[0], wanted[1], wanted[2]
    raise MalformedContainerError("ZIP64 marker without a ZIP64 extra field")


def _read_exact(handle: InputHandle, n: int, what: str, offset: int) -> bytes:
    data: bytes = handle.read(n)
    if len(data) != n:
        raise MalformedContainerError(f"Truncated {what}", offset=offset)
    return data


def read_local_header(handle: InputHandle) -> EntryDescriptor:
    """Read a local file header at the handle's current position.

    On return the handle is positioned at the first byte of entry data.

    Args:
        handle (InputHandle): Input positioned on a ``PK\\x03\\x04`` record.

    Returns:
        EntryDescriptor: The decoded header.

    Raises:
        MalformedContainerError: On a wrong signature or a truncated header.
    """
    offset: int = handle.tell()
    fixed: bytes = _read_exact(handle, LOCAL_HEADER_SIZE, "local file header", offset)
    (
        sig,
        _version,
        flags,
        method,
        _mtime,
        _mdate,
        _crc,
        csize,
        usize,
        name_len,
        extra_len,
    ) = _LOCAL.unpack(fixed)
    if sig != SIG_LOCAL:
        raise MalformedContainerError(f"Bad local header signature {sig!r}", offset=offset)
    raw_name: bytes = _read_exact(handle, name_len, "local header name", offset)
    extra: bytes = _read_exact(handle, extra_len, "local header extra field", offset)
    usize, csize, _ = apply_zip64_extra(extra, uncompressed_size=usize, compressed_size=csize)
    return EntryDescriptor(
        name=decode_name(raw_name, flags),
        raw_name=raw_name,
        method=method,
        flags=flags,
        compressed_size=csize,
        uncompressed_size=usize,
        offset=offset,
        data_offset=handle.tell(),
        zip64=any(hid == ZIP64_EXTRA_ID for hid, _ in iter_extra_fields(extra)),
    )


def local_header_length(fixed: bytes) -> int:
    """Return the full length of a local header from its fixed 30-byte part."""
    name_len, extra_len = struct.unpack_from("<HH", fixed, 26)
    return LOCAL_HEADER_SIZE + name_len + extra_len


def locate_local_data(handle: SeekableInput, entry: EntryDescriptor) -> int:
    """Return the data offset of a central-directory entry by reading its local header.

    Raises:
        MalformedContainerError: If the local header is missing or truncated.
    """
    if entry.offset + LOCAL_HEADER_SIZE > handle.size():
        raise MalformedContainerError("Local header lies past the end", offset=entry.offset)
    handle.seek(entry.offset)
    fixed: bytes = _read_exact(handle, LOCAL_HEADER_SIZE, "local file header", entry.offset)
    sig: bytes = fixed[:4]
    if sig != SIG_LOCAL:
        raise MalformedContainerError(f"Bad local header signature {sig!r}", offset=entry.offset)
    return entry.offset + local_header_length(fixed)


def read_central_header(handle: InputHandle) -> EntryDescriptor:
    """Read one central directory header at the handle's current position.

    Raises:
        MalformedContainerError: On a wrong signature or a truncated record.
    """
    offset: int = handle.tell()
    fixed: bytes = _read_exact(handle, CENTRAL_HEADER_SIZE, "central directory header", offset)
    (
        sig,
        _made_by,
        _needed,
        flags,
        method,
        _mtime,
        _mdate,
        _crc,
        csize,
        usize,
        name_len,
        extra_len,
        comment_len,
        _disk,
        _int_attr,
        _ext_attr,
        local_offset,
    ) = _CENTRAL.unpack(fixed)
    if sig != SIG_CENTRAL:
        raise MalformedContainerError(f"Bad central directory signature {sig!r}", offset=offset)
    raw_name: bytes = _read_exact(handle, name_len, "central directory name", offset)
    extra: bytes = _read_exact(handle, extra_len, "central directory extra field", offset)
    if handle.skip(comment_len) != comment_len:
        raise MalformedContainerError("Truncated central directory comment", offset=offset)
    usize, csize, local_offset = apply_zip64_extra(
        extra,
        uncompressed_size=usize,
        compressed_size=csize,
        offset=local_offset,
    )
    return EntryDescriptor(
        name=decode_name(raw_name, flags),
        raw_name=raw_name,
        method=method,
        flags=flags,
        compressed_size=csize,
        uncompressed_size=usize,
        offset=local_offset,
    )


def _find_eocd_in_tail(tail: bytes) -> int:
    """Return the index of the EOCD record in ``tail``, or -1.

    Candidates are tried from the end; one whose comment length accounts for
    exactly the remaining bytes wins. Otherwise the last structurally complete
    candidate is accepted (archives with trailing garbage).
    """
    fallback: int = -1
    idx: int = tail.rfind(SIG_EOCD)
    while idx >= 0:
        if idx + EOCD_SIZE <= len(tail):
            comment_len: int = struct.unpack_from("<H", tail, idx + 20)[0]
            if idx + EOCD_SIZE + comment_len == len(tail):
                return idx
            if fallback < 0:
                fallback = idx
        idx = tail.rfind(SIG_EOCD, 0, idx)
    return fallback


def find_end_of_central_directory(handle: SeekableInput) -> EndOfCentralDirectory | None:
    """Locate the end-of-central-directory record by scanning backwards.

    Only the last ``22 + 65535`` bytes are examined. When a ZIP64 locator
    immediately precedes the EOCD record, the ZIP64 record's values are used.

    Args:
        handle (SeekableInput): Random-access input.

    Returns:
        EndOfCentralDirectory | None: The record, or ``None`` if no EOCD exists.

    Raises:
        MalformedContainerError: If a ZIP64 locator points at a bad record.
    """
    size: int = handle.size()
    take: int = min(size, EOCD_SIZE + MAX_COMMENT_SIZE)
    tail: bytes = handle.read_at(size - take, take)
    idx: int = _find_eocd_in_tail(tail)
    if idx < 0:
        return None

    eocd_offset: int = size - take + idx
    (_sig, _disk, _cd_disk, _n_this, n_total, cd_size, cd_offset, comment_len) = _EOCD.unpack_from(
        tail, idx
    )

    locator_offset: int = eocd_offset - ZIP64_LOCATOR_SIZE
    if locator_offset >= 0:
        locator: bytes = handle.read_at(locator_offset, ZIP64_LOCATOR_SIZE)
        if len(locator) == ZIP64_LOCATOR_SIZE and locator[:4] == SIG_ZIP64_LOCATOR:
            _lsig, _ldisk, zip64_offset, _disks = _ZIP64_LOCATOR.unpack(locator)
            record: bytes = handle.read_at(zip64_offset, ZIP64_EOCD_SIZE)
            if len(record) != ZIP64_EOCD_SIZE or record[:4] != SIG_ZIP64_EOCD:
                raise MalformedContainerError(
                    "Bad ZIP64 end of central directory", offset=zip64_offset
                )
            (_s, _rsize, _made, _need, _d, _cdd, _nt, n_total64, cd_size64, cd_offset64) = (
                _ZIP64_EOCD.unpack(record)
            )
            return EndOfCentralDirectory(
                offset=eocd_offset,
                entry_count=n_total64,
                cd_size=cd_size64,
                cd_offset=cd_offset64,
                comment_length=comment_len,
                zip64=True,
            )

    return EndOfCentralDirectory(
        offset=eocd_offset,
        entry_count=n_total,
        cd_size=cd_size,
        cd_offset=cd_offset,
        comment_length=comment_len,
    )
