# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_handles.py
#   file_relpath : tests/io/test_handles.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the streaming and seekable input handles."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from zipsniff.errors import MarkLimitExceededError
from zipsniff.io.handles import (
    BoundedPrefixBuffer,
    Capability,
    InputHandle,
    SeekableInput,
    open_input,
)

if TYPE_CHECKING:
    from pathlib import Path


class _NonSeekable(io.RawIOBase):
    """A readable stream that refuses to seek, like a pipe."""

    def __init__(self, data: bytes) -> None:
        self._inner = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def readinto(self, b: bytearray) -> int:  # type: ignore[override]
        data: bytes = self._inner.read(len(b))
        b[: len(data)] = data
        return len(data)


DATA: bytes = bytes(range(256)) * 4


def test_buffer_peek_does_not_consume() -> None:
    buf = BoundedPrefixBuffer(io.BytesIO(DATA), mark_limit=64)
    assert buf.peek(4) == DATA[:4]
    assert buf.tell() == 0
    assert buf.read(4) == DATA[:4]
    assert buf.tell() == 4


def test_buffer_peek_is_truncated_at_mark_limit() -> None:
    buf = BoundedPrefixBuffer(io.BytesIO(DATA), mark_limit=10)
    buf.read(8)
    assert buf.peek(100) == DATA[8:10]


def test_buffer_rewinds_within_mark_limit() -> None:
    buf = BoundedPrefixBuffer(io.BytesIO(DATA), mark_limit=64)
    buf.read(30)
    buf.skip(34)
    buf.rewind()
    assert buf.tell() == 0
    assert buf.read(64) == DATA[:64]


def test_buffer_rewind_fails_after_reading_past_mark_limit() -> None:
    buf = BoundedPrefixBuffer(io.BytesIO(DATA), mark_limit=16)
    assert buf.read(20) == DATA[:20]
    with pytest.raises(MarkLimitExceededError) as excinfo:
        buf.rewind()
    assert excinfo.value.consumed == 20
    assert excinfo.value.mark_limit == 16


def test_buffer_reports_eof_and_short_reads() -> None:
    buf = BoundedPrefixBuffer(io.BytesIO(b"abc"), mark_limit=16)
    assert buf.read(10) == b"abc"
    assert buf.read(1) == b""
    assert buf.at_eof
    assert buf.skip(5) == 0


def test_buffer_rejects_non_positive_mark_limit() -> None:
    with pytest.raises(ValueError):
        BoundedPrefixBuffer(io.BytesIO(b""), mark_limit=0)


def test_buffer_closes_only_owned_streams() -> None:
    stream = io.BytesIO(DATA)
    BoundedPrefixBuffer(stream, mark_limit=8).close()
    assert not stream.closed
    with BoundedPrefixBuffer(stream, mark_limit=8, owns_stream=True):
        pass
    assert stream.closed


def test_seekable_offsets_are_relative_to_origin() -> None:
    stream = io.BytesIO(b"junk" + DATA)
    stream.seek(4)
    handle = SeekableInput(stream)
    assert handle.size() == len(DATA)
    assert handle.read_at(10, 2) == DATA[10:12]
    assert handle.tell() == 12
    handle.rewind()
    assert handle.read(3) == DATA[:3]


def test_seekable_peek_and_skip() -> None:
    handle = SeekableInput.from_bytes(DATA)
    assert handle.peek(5) == DATA[:5]
    assert handle.tell() == 0
    assert handle.skip(10) == 10
    assert handle.skip(10_000) == len(DATA) - 10


def test_seekable_requires_seekable_stream() -> None:
    with pytest.raises(ValueError):
        SeekableInput(_NonSeekable(DATA))  # type: ignore[arg-type]


def test_open_input_from_bytes() -> None:
    handle = open_input(DATA)
    assert handle.capability is Capability.SEEKABLE
    streaming = open_input(DATA, streaming=True, mark_limit=32)
    assert isinstance(streaming, BoundedPrefixBuffer)
    assert streaming.mark_limit == 32


def test_open_input_from_path(tmp_path: Path) -> None:
    f: Path = tmp_path / "data.bin"
    f.write_bytes(DATA)
    with open_input(f) as handle:
        assert handle.capability is Capability.SEEKABLE
        assert handle.read(4) == DATA[:4]
    with open_input(str(f), streaming=True) as handle:
        assert handle.capability is Capability.STREAMING


def test_open_input_wraps_pipes_as_streaming() -> None:
    handle = open_input(_NonSeekable(DATA))  # type: ignore[arg-type]
    assert handle.capability is Capability.STREAMING


def test_open_input_returns_existing_handles() -> None:
    handle = SeekableInput.from_bytes(DATA)
    assert open_input(handle) is handle


def test_open_input_rejects_unsupported_sources() -> None:
    with pytest.raises(TypeError):
        open_input(42)  # type: ignore[arg-type]


def test_handles_satisfy_protocol() -> None:
    assert isinstance(SeekableInput.from_bytes(b""), InputHandle)
    assert isinstance(BoundedPrefixBuffer(io.BytesIO(b"")), InputHandle)
