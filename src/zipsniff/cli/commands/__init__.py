# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff CLI subcommands."""

from __future__ import annotations
