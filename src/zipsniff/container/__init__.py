# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/container/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZIP container access: record parsing, sequential scanning and central-directory walks.

Modules:
    records: Record layouts and parsers.
    fragments: Bounded decoding of identifying entry payloads.
    scanner: `BoundedEntryScanner` for streaming inputs.
    central: `SeekableDeepResolver` for random-access inputs.
"""

from __future__ import annotations
