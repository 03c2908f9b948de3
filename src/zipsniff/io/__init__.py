# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/io/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Input handle abstractions (streaming with a rewind ceiling, or seekable)."""

from __future__ import annotations

from zipsniff.io.handles import (
    BoundedPrefixBuffer,
    Capability,
    InputHandle,
    InputSource,
    SeekableInput,
    open_input,
)

__all__ = [
    "BoundedPrefixBuffer",
    "Capability",
    "InputHandle",
    "InputSource",
    "SeekableInput",
    "open_input",
]
