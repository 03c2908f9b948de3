# topmark:header:start
#
#   project      : ZipSniff
#   file         : base.py
#   file_relpath : src/zipsniff/signatures/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Fixed leading-byte signatures for non-container formats."""

from __future__ import annotations

from dataclasses import dataclass

from zipsniff.mediatypes import MediaType


@dataclass(frozen=True)
class ByteSignature:
    """A fixed byte pattern at a fixed offset identifying one media type.

    Attributes:
        name (str): Stable identifier (``"tiff_le"``).
        media_type (MediaType): Type reported on a match.
        pattern (bytes): Bytes expected at ``offset``.
        offset (int): Position of ``pattern`` in the prefix.
        also (tuple[tuple[int, bytes], ...]): Extra ``(offset, bytes)`` checks that must
            hold as well (RIFF sub-types, for instance).
        description (str): Human-readable description.
    """

    name: str
    media_type: MediaType
    pattern: bytes
    offset: int = 0
    also: tuple[tuple[int, bytes], ...] = ()
    description: str = ""

    @property
    def span(self) -> int:
        """Number of prefix bytes needed to evaluate this signature."""
        end: int = self.offset + len(self.pattern)
        for off, data in self.also:
            end = max(end, off + len(data))
        return end

    def matches(self, prefix: bytes) -> bool:
        """Return True if ``prefix`` carries this signature.

        A prefix shorter than `span` never matches.
        """
        if len(prefix) < self.span:
            return False
        if prefix[self.offset : self.offset + len(self.pattern)] != self.pattern:
            return False
        return all(prefix[off : off + len(data)] == data for off, data in self.also)
