# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_records.py
#   file_relpath : tests/container/test_records.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for ZIP record parsing."""

from __future__ import annotations

import io
import struct

import pytest

from tests.archives import build_zip, end_record, local_header, zip64_extra
from zipsniff.container.records import (
    EndOfCentralDirectory,
    EntryDescriptor,
    apply_zip64_extra,
    decode_name,
    find_end_of_central_directory,
    iter_extra_fields,
    read_central_header,
    read_local_header,
)
from zipsniff.errors import MalformedContainerError
from zipsniff.io.handles import BoundedPrefixBuffer, SeekableInput


def test_read_local_header_positions_at_data() -> None:
    record: bytes = local_header("hello.txt", b"hello world")
    handle = BoundedPrefixBuffer(io.BytesIO(record), mark_limit=1024)
    entry: EntryDescriptor = read_local_header(handle)
    assert entry.name == "hello.txt"
    assert entry.compressed_size == 11
    assert entry.offset == 0
    assert entry.data_offset == 30 + len("hello.txt")
    assert handle.read(11) == b"hello world"


def test_read_local_header_rejects_bad_signature() -> None:
    record: bytes = local_header("x", b"", signature=b"PK\x09\x09")
    with pytest.raises(MalformedContainerError, match="signature"):
        read_local_header(SeekableInput.from_bytes(record))


def test_read_local_header_rejects_truncation() -> None:
    record: bytes = local_header("some/long/name.xml", b"data")
    with pytest.raises(MalformedContainerError, match="Truncated"):
        read_local_header(SeekableInput.from_bytes(record[:35]))


def test_local_header_zip64_sizes() -> None:
    extra: bytes = zip64_extra(5, 5)
    record: bytes = local_header(
        "big.bin",
        b"12345",
        compressed_size=0xFFFFFFFF,
        uncompressed_size=0xFFFFFFFF,
        extra=extra,
    )
    entry: EntryDescriptor = read_local_header(SeekableInput.from_bytes(record))
    assert entry.compressed_size == 5
    assert entry.uncompressed_size == 5
    assert entry.zip64


def test_zip64_marker_without_extra_field_is_malformed() -> None:
    with pytest.raises(MalformedContainerError):
        apply_zip64_extra(b"", uncompressed_size=0xFFFFFFFF, compressed_size=1)


def test_apply_zip64_extra_only_replaces_markers() -> None:
    extra: bytes = zip64_extra(1 << 33)
    assert apply_zip64_extra(
        extra, uncompressed_size=10, compressed_size=0xFFFFFFFF, offset=7
    ) == (10, 1 << 33, 7)


def test_iter_extra_fields_ignores_truncated_tail() -> None:
    extra: bytes = struct.pack("<HH", 0x5455, 1) + b"\x00" + struct.pack("<HH", 0x0001, 8) + b"x"
    assert list(iter_extra_fields(extra)) == [(0x5455, b"\x00")]


def test_decode_name_falls_back_to_cp437() -> None:
    assert decode_name("Ünïcode".encode(), 0) == "Ünïcode"
    assert decode_name(b"caf\x82", 0) == "café"


def test_find_eocd_and_read_central_headers() -> None:
    archive: bytes = build_zip([("a.txt", b"a"), ("dir/b.txt", b"bb")], comment=b"hello")
    handle = SeekableInput.from_bytes(archive)
    eocd: EndOfCentralDirectory | None = find_end_of_central_directory(handle)
    assert eocd is not None
    assert eocd.entry_count == 2
    assert eocd.comment_length == 5
    assert not eocd.zip64

    handle.seek(eocd.cd_offset)
    first: EntryDescriptor = read_central_header(handle)
    second: EntryDescriptor = read_central_header(handle)
    assert [first.name, second.name] == ["a.txt", "dir/b.txt"]
    assert second.offset > first.offset
    assert handle.tell() == eocd.cd_offset + eocd.cd_size


def test_find_eocd_returns_none_without_record() -> None:
    handle = SeekableInput.from_bytes(b"PK\x03\x04" + bytes(64))
    assert find_end_of_central_directory(handle) is None


def test_find_eocd_in_empty_archive() -> None:
    eocd: EndOfCentralDirectory | None = find_end_of_central_directory(
        SeekableInput.from_bytes(end_record())
    )
    assert eocd is not None
    assert eocd.offset == 0
    assert eocd.entry_count == 0


def _as_zip64(archive: bytes) -> bytes:
    """Move the end record values into ZIP64 records, leaving markers behind."""
    eocd_at: int = archive.rfind(b"PK\x05\x06")
    _sig, _d, _cdd, _n, n_total, cd_size, cd_offset, _clen = struct.unpack_from(
        "<4sHHHHIIH", archive, eocd_at
    )
    zip64_eocd: bytes = struct.pack(
        "<4sQHHIIQQQQ", b"PK\x06\x06", 44, 45, 45, 0, 0, n_total, n_total, cd_size, cd_offset
    )
    locator: bytes = struct.pack("<4sIQI", b"PK\x06\x07", 0, eocd_at, 1)
    eocd: bytes = struct.pack(
        "<4sHHHHIIH", b"PK\x05\x06", 0, 0, 0xFFFF, 0xFFFF, 0xFFFFFFFF, 0xFFFFFFFF, 0
    )
    return archive[:eocd_at] + zip64_eocd + locator + eocd


def test_find_eocd_reads_zip64_records() -> None:
    archive: bytes = _as_zip64(build_zip([("a.txt", b"payload"), ("b.txt", b"more")]))
    handle = SeekableInput.from_bytes(archive)
    eocd: EndOfCentralDirectory | None = find_end_of_central_directory(handle)
    assert eocd is not None
    assert eocd.zip64
    assert eocd.entry_count == 2
    handle.seek(eocd.cd_offset)
    assert read_central_header(handle).name == "a.txt"


def test_bad_zip64_locator_target_is_malformed() -> None:
    archive: bytes = _as_zip64(build_zip([("a.txt", b"payload")]))
    broken: bytes = archive.replace(b"PK\x06\x06", b"XX\x06\x06")
    with pytest.raises(MalformedContainerError, match="ZIP64"):
        find_end_of_central_directory(SeekableInput.from_bytes(broken))
