# topmark:header:start
#
#   project      : ZipSniff
#   file         : handles.py
#   file_relpath : src/zipsniff/io/handles.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Input handles over the byte source being classified.

A detection call reads through exactly one `InputHandle`. Two capabilities
exist:

- `Capability.STREAMING`: sequential reads only. `BoundedPrefixBuffer`
  retains at most ``mark_limit`` bytes so the handle can be rewound for the
  next detector in a chain. Reading beyond the ceiling is allowed, but then
  `BoundedPrefixBuffer.rewind` fails with
  `zipsniff.errors.MarkLimitExceededError`.
- `Capability.SEEKABLE`: random access via `SeekableInput.seek`, used by the
  central-directory resolver.

Handles are not thread-safe and must not be shared between concurrent calls.
Positions reported by `tell()` are relative to where the handle started, not
to the underlying file.
"""

from __future__ import annotations

import io
import os
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, Protocol, Union, runtime_checkable

from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.constants import CHUNK_SIZE, DEFAULT_MARK_LIMIT
from zipsniff.errors import MarkLimitExceededError

if TYPE_CHECKING:
    from types import TracebackType

logger: ZipsniffLogger = get_logger(__name__)


class Capability(Enum):
    """What an input handle can do besides sequential reads.

    Attributes:
        STREAMING: Sequential reads with a bounded rewind window.
        SEEKABLE: Random access (seek + read).
    """

    STREAMING = "streaming"
    SEEKABLE = "seekable"


@runtime_checkable
class InputHandle(Protocol):
    """Protocol shared by all input handles."""

    @property
    def capability(self) -> Capability:
        """The handle's capability flag."""
        ...

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes; fewer only at end of input."""
        ...

    def peek(self, n: int) -> bytes:
        """Return up to ``n`` upcoming bytes without consuming them."""
        ...

    def skip(self, n: int) -> int:
        """Advance by up to ``n`` bytes and return how many were skipped."""
        ...

    def tell(self) -> int:
        """Return the number of bytes consumed from the handle's start."""
        ...

    def rewind(self) -> None:
        """Return to the handle's start."""
        ...


class BoundedPrefixBuffer:
    """Streaming handle with an explicit rewind ceiling.

    Every byte read while the position is below ``mark_limit`` is retained,
    so `rewind` works as long as no more than ``mark_limit`` bytes were
    consumed. Bytes past the ceiling are passed through without being kept.

    Args:
        stream (IO[bytes]): Underlying binary stream; it is read sequentially only.
        mark_limit (int): Maximum number of bytes retained for rewinding.
        owns_stream (bool): Close ``stream`` when the handle is closed.
    """

    def __init__(
        self,
        stream: IO[bytes],
        mark_limit: int = DEFAULT_MARK_LIMIT,
        *,
        owns_stream: bool = False,
    ) -> None:
        if mark_limit <= 0:
            raise ValueError(f"mark_limit must be positive, got {mark_limit}")
        self._stream: IO[bytes] = stream
        self._mark_limit: int = mark_limit
        self._owns_stream: bool = owns_stream
        self._buffer: bytearray = bytearray()
        self._pos: int = 0
        self._eof: bool = False

    @property
    def capability(self) -> Capability:
        """Always `Capability.STREAMING`."""
        return Capability.STREAMING

    @property
    def mark_limit(self) -> int:
        """Maximum number of bytes that can be rewound."""
        return self._mark_limit

    @property
    def at_eof(self) -> bool:
        """True once the underlying stream reported end of input."""
        return self._eof and self._pos >= len(self._buffer)

    def remaining_budget(self) -> int:
        """Bytes that can still be read without losing the ability to rewind."""
        return max(0, self._mark_limit - self._pos)

    def _pull(self, n: int) -> bytes:
        """Read ``n`` fresh bytes from the stream, retaining them if below the ceiling."""
        out = bytearray()
        while len(out) < n and not self._eof:
            data: bytes = self._stream.read(n - len(out))
            if not data:
                self._eof = True
                break
            if self._pos == len(self._buffer):
                room: int = self._mark_limit - len(self._buffer)
                if room > 0:
                    self._buffer += data[:room]
            self._pos += len(data)
            out += data
        return bytes(out)

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes.

        Args:
            n (int): Maximum number of bytes to return.

        Returns:
            bytes: The data read; shorter than ``n`` only at end of input.
        """
        if n <= 0:
            return b""
        out = bytearray()
        if self._pos < len(self._buffer):
            chunk = self._buffer[self._pos : self._pos + n]
            out += chunk
            self._pos += len(chunk)
        if len(out) < n:
            out += self._pull(n - len(out))
        return bytes(out)

    def peek(self, n: int) -> bytes:
        """Return up to ``n`` upcoming bytes without consuming them.

        Only bytes inside the rewind window can be peeked; the result is
        truncated at the mark limit.
        """
        n = min(n, self.remaining_budget())
        start: int = self._pos
        data: bytes = self.read(n)
        self._pos = start
        return data

    def skip(self, n: int) -> int:
        """Advance by up to ``n`` bytes, reading (and retaining) as needed."""
        skipped = 0
        while skipped < n:
            data: bytes = self.read(min(CHUNK_SIZE, n - skipped))
            if not data:
                break
            skipped += len(data)
        return skipped

    def tell(self) -> int:
        """Return the number of bytes consumed since the start."""
        return self._pos

    def rewind(self) -> None:
        """Return to the start of the input.

        Raises:
            MarkLimitExceededError: If bytes past the mark limit were consumed.
        """
        if self._pos > len(self._buffer):
            raise MarkLimitExceededError(self._pos, self._mark_limit)
        self._pos = 0

    def close(self) -> None:
        """Release the buffer and close the stream if owned."""
        self._buffer = bytearray()
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> BoundedPrefixBuffer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class SeekableInput:
    """Random-access handle over a seekable binary stream.

    The handle's origin is the stream position at construction time; all
    offsets (`tell`, `seek`, `size`) are relative to it.

    Args:
        stream (IO[bytes]): Seekable binary stream.
        owns_stream (bool): Close ``stream`` when the handle is closed.
    """

    def __init__(self, stream: IO[bytes], *, owns_stream: bool = False) -> None:
        if not stream.seekable():
            raise ValueError("SeekableInput requires a seekable stream")
        self._stream: IO[bytes] = stream
        self._owns_stream: bool = owns_stream
        self._origin: int = stream.tell()

    @classmethod
    def from_bytes(cls, data: bytes) -> SeekableInput:
        """Wrap an in-memory byte string."""
        return cls(io.BytesIO(data), owns_stream=True)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> SeekableInput:
        """Open ``path`` for reading; the handle owns the file."""
        return cls(Path(path).open("rb"), owns_stream=True)

    @property
    def capability(self) -> Capability:
        """Always `Capability.SEEKABLE`."""
        return Capability.SEEKABLE

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes from the current position."""
        if n <= 0:
            return b""
        return self._stream.read(n)

    def read_at(self, offset: int, n: int) -> bytes:
        """Seek to ``offset`` and read up to ``n`` bytes (nothing at or past the end)."""
        if offset >= self.size():
            return b""
        self.seek(offset)
        return self.read(n)

    def peek(self, n: int) -> bytes:
        """Return up to ``n`` upcoming bytes without consuming them."""
        pos: int = self._stream.tell()
        data: bytes = self.read(n)
        self._stream.seek(pos)
        return data

    def skip(self, n: int) -> int:
        """Advance by up to ``n`` bytes (never past the end)."""
        pos: int = self.tell()
        target: int = min(pos + max(0, n), self.size())
        self.seek(target)
        return target - pos

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move to ``offset`` (relative to the origin for ``SEEK_SET``).

        Returns:
            int: The new position relative to the origin.
        """
        if whence == os.SEEK_SET:
            if offset < 0:
                raise ValueError(f"negative seek offset: {offset}")
            self._stream.seek(self._origin + offset)
        else:
            self._stream.seek(offset, whence)
        return self.tell()

    def tell(self) -> int:
        """Return the position relative to the origin."""
        return self._stream.tell() - self._origin

    def size(self) -> int:
        """Return the number of bytes between the origin and the end."""
        pos: int = self._stream.tell()
        end: int = self._stream.seek(0, os.SEEK_END)
        self._stream.seek(pos)
        return max(0, end - self._origin)

    def rewind(self) -> None:
        """Return to the origin."""
        self._stream.seek(self._origin)

    def close(self) -> None:
        """Close the stream if owned."""
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> SeekableInput:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


InputSource = Union[bytes, bytearray, memoryview, str, "os.PathLike[str]", IO[bytes], InputHandle]


def open_input(
    source: InputSource,
    *,
    mark_limit: int = DEFAULT_MARK_LIMIT,
    streaming: bool = False,
) -> BoundedPrefixBuffer | SeekableInput:
    """Wrap ``source`` in the most capable handle allowed.

    Args:
        source (InputSource): Bytes, a filesystem path, a binary stream, or an
            existing handle (returned unchanged).
        mark_limit (int): Rewind ceiling for streaming handles.
        streaming (bool): Force a streaming handle even when random access is possible.

    Returns:
        BoundedPrefixBuffer | SeekableInput: The handle. Handles built from paths
            or bytes own their underlying stream; close them when done.

    Raises:
        TypeError: If ``source`` is not a supported input.
    """
    if isinstance(source, (BoundedPrefixBuffer, SeekableInput)):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        buffer = io.BytesIO(bytes(source))
        if streaming:
            return BoundedPrefixBuffer(buffer, mark_limit, owns_stream=True)
        return SeekableInput(buffer, owns_stream=True)
    if isinstance(source, (str, os.PathLike)):
        fh: IO[bytes] = Path(source).open("rb")
        if streaming:
            return BoundedPrefixBuffer(fh, mark_limit, owns_stream=True)
        return SeekableInput(fh, owns_stream=True)
    if hasattr(source, "read"):
        stream: IO[bytes] = source  # type: ignore[assignment]
        seekable: bool = bool(getattr(stream, "seekable", lambda: False)())
        if streaming or not seekable:
            logger.trace("Wrapping %r as a streaming handle", stream)
            return BoundedPrefixBuffer(stream, mark_limit)
        return SeekableInput(stream)
    raise TypeError(f"Unsupported input source: {type(source).__name__}")
