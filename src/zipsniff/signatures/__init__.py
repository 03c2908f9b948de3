# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/signatures/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Leading-byte signatures for formats that are *not* ZIP containers.

The detection orchestrator consults this table first. A hit is final: the
input is reported as that type and no container scanning takes place.
"""

from __future__ import annotations
