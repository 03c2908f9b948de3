# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command-line interface for ZipSniff.

The click group lives in `zipsniff.cli.main`; each subcommand has its own
module under `zipsniff.cli.commands`.
"""

from __future__ import annotations
