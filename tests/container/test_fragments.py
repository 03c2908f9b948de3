# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_fragments.py
#   file_relpath : tests/container/test_fragments.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for bounded fragment decoding."""

from __future__ import annotations

import io
import random
import struct
import zlib

import pytest

from tests.archives import deflate_raw
from tests.conftest import make_config
from zipsniff.constants import CHUNK_SIZE
from zipsniff.container.fragments import (
    StreamEnd,
    decode_fragment,
    inflate_to_end,
    is_decodable,
    scan_to_descriptor,
)
from zipsniff.container.records import (
    FLAG_ENCRYPTED,
    METHOD_DEFLATED,
    METHOD_STORED,
    EntryDescriptor,
)
from zipsniff.errors import MalformedContainerError, UnsupportedCompressionError
from zipsniff.io.handles import BoundedPrefixBuffer

TEXT: bytes = b"<Types>" + b"<Override/>" * 500 + b"</Types>"


def _entry(**kwargs: int) -> EntryDescriptor:
    fields: dict[str, int] = {
        "method": METHOD_DEFLATED,
        "flags": 0,
        "compressed_size": 100,
        "uncompressed_size": 400,
        "offset": 0,
    }
    fields.update(kwargs)
    return EntryDescriptor(name="[Content_Types].xml", raw_name=b"[Content_Types].xml", **fields)


def test_stored_fragment_is_truncated_to_limit() -> None:
    assert decode_fragment(b"abcdef", METHOD_STORED, 4) == b"abcd"


def test_deflated_fragment_is_truncated_to_limit() -> None:
    fragment: bytes | None = decode_fragment(deflate_raw(TEXT), METHOD_DEFLATED, 64)
    assert fragment == TEXT[:64]


def test_corrupt_deflate_yields_none() -> None:
    assert decode_fragment(b"\xff\xff\xff\xff", METHOD_DEFLATED, 64) is None


def test_unsupported_method_raises() -> None:
    with pytest.raises(UnsupportedCompressionError) as excinfo:
        decode_fragment(b"", 12, 64)
    assert excinfo.value.method == 12


def test_is_decodable_honors_ceilings() -> None:
    config = make_config(max_marker_compressed_size=1000)
    assert is_decodable(_entry(), config)
    assert not is_decodable(_entry(compressed_size=1001), config)
    assert not is_decodable(_entry(flags=FLAG_ENCRYPTED), config)
    assert not is_decodable(_entry(method=14), config)


def test_inflate_to_end_stops_at_stream_end() -> None:
    stream: bytes = deflate_raw(TEXT)
    handle = BoundedPrefixBuffer(io.BytesIO(stream + b"PK\x07\x08trailer"), mark_limit=1 << 16)
    captured, end = inflate_to_end(handle, budget=1 << 16, capture=16)
    assert end is StreamEnd.COMPLETE
    assert captured == TEXT[:16]
    assert handle.tell() == len(stream)
    assert handle.peek(4) == b"PK\x07\x08"


def test_inflate_to_end_respects_budget() -> None:
    stream: bytes = deflate_raw(bytes(range(256)) * 64)
    handle = BoundedPrefixBuffer(io.BytesIO(stream), mark_limit=1 << 16)
    budget: int = len(stream) // 2
    _captured, end = inflate_to_end(handle, budget=budget)
    assert end is StreamEnd.EXHAUSTED
    assert handle.tell() <= budget


def test_inflate_to_end_reports_truncated_input() -> None:
    stream: bytes = deflate_raw(TEXT)
    handle = BoundedPrefixBuffer(io.BytesIO(stream[:-3]), mark_limit=1 << 16)
    _captured, end = inflate_to_end(handle, budget=1 << 16)
    assert end is StreamEnd.EXHAUSTED


def test_inflate_to_end_rejects_garbage() -> None:
    handle = BoundedPrefixBuffer(io.BytesIO(b"\xff" * 64), mark_limit=1 << 16)
    with pytest.raises(MalformedContainerError):
        inflate_to_end(handle, budget=1 << 16)


def test_inflate_to_end_stops_at_compressed_ceiling() -> None:
    stream: bytes = deflate_raw(random.Random(1).randbytes(8192))
    handle = BoundedPrefixBuffer(io.BytesIO(stream), mark_limit=1 << 16)
    captured, end = inflate_to_end(handle, budget=1 << 16, capture=16, max_input=1024)
    assert end is StreamEnd.CEILING
    assert len(captured) == 16
    assert handle.tell() <= 1024


def test_inflate_to_end_stops_when_expansion_ratio_is_exceeded() -> None:
    stream: bytes = deflate_raw(bytes(16 * 1024 * 1024))
    handle = BoundedPrefixBuffer(io.BytesIO(stream), mark_limit=1 << 20)
    _captured, end = inflate_to_end(handle, budget=1 << 20)
    assert end is StreamEnd.CEILING


def _descriptor(data: bytes, *, crc: int | None = None) -> bytes:
    checksum: int = zlib.crc32(data) if crc is None else crc
    return struct.pack("<4sIII", b"PK\x07\x08", checksum, len(data), len(data))


def test_scan_to_descriptor_skips_false_signatures() -> None:
    data: bytes = b"head PK\x07\x08" + b"\x00" * 12 + b" tail"
    handle = BoundedPrefixBuffer(io.BytesIO(data + _descriptor(data)), mark_limit=1 << 16)
    captured, end = scan_to_descriptor(handle, budget=1 << 16, stored=True, capture=4)
    assert end is StreamEnd.COMPLETE
    assert captured == b"head"
    assert handle.tell() == len(data)


def test_scan_to_descriptor_crosses_chunk_boundaries() -> None:
    data: bytes = random.Random(2).randbytes(CHUNK_SIZE * 2 + 5)
    handle = BoundedPrefixBuffer(io.BytesIO(data + _descriptor(data)), mark_limit=1 << 20)
    captured, end = scan_to_descriptor(handle, budget=1 << 20, stored=True, capture=8)
    assert end is StreamEnd.COMPLETE
    assert captured == data[:8]
    assert handle.tell() == len(data)


def test_scan_to_descriptor_checks_stored_crc() -> None:
    data: bytes = b"payload"
    stream: bytes = data + _descriptor(data, crc=0)
    handle = BoundedPrefixBuffer(io.BytesIO(stream), mark_limit=1 << 16)
    _captured, end = scan_to_descriptor(handle, budget=1 << 16, stored=True)
    assert end is StreamEnd.EXHAUSTED
    # Without the CRC check only the recorded size has to match.
    handle.rewind()
    _captured, end = scan_to_descriptor(handle, budget=1 << 16)
    assert end is StreamEnd.COMPLETE
