# topmark:header:start
#
#   project      : ZipSniff
#   file         : errors.py
#   file_relpath : src/zipsniff/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised inside the ZipSniff detection engine.

Usage:
    Component code (input handles, record parsers, configuration) raises these
    exceptions. The detection orchestrator catches the container and input
    related ones at its boundary and degrades the result to *unknown*; they
    never escape a `detect()` call.

    Configuration errors are the exception: they are raised while building a
    `zipsniff.config.model.DetectorConfig`, before any detection runs, and are
    surfaced to the caller (the CLI maps them to a dedicated exit code).
"""

from __future__ import annotations


class ZipsniffError(Exception):
    """Base class for all ZipSniff errors."""


class MalformedContainerError(ZipsniffError):
    """A ZIP record is truncated or carries an unexpected signature.

    Attributes:
        offset (int | None): Absolute offset of the offending record, if known.
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset: int | None = offset

    def __str__(self) -> str:
        base: str = super().__str__()
        if self.offset is None:
            return base
        return f"{base} (at offset {self.offset})"


class MarkLimitExceededError(ZipsniffError):
    """A streaming handle was asked to rewind past its buffered prefix."""

    def __init__(self, consumed: int, mark_limit: int) -> None:
        super().__init__(
            f"Cannot rewind: {consumed} bytes consumed exceeds the mark limit of {mark_limit}"
        )
        self.consumed: int = consumed
        self.mark_limit: int = mark_limit


class UnsupportedCompressionError(ZipsniffError):
    """An entry uses a compression method the fragment decoder cannot handle."""

    def __init__(self, method: int) -> None:
        super().__init__(f"Unsupported compression method: {method}")
        self.method: int = method


class ConfigError(ZipsniffError):
    """Invalid or malformed configuration value."""
