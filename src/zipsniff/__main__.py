# topmark:header:start
#
#   project      : ZipSniff
#   file         : __main__.py
#   file_relpath : src/zipsniff/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running ZipSniff via ``python -m zipsniff``.

Delegates to `zipsniff.cli.main.cli`, the single authoritative CLI entry
point.

Examples:
    python -m zipsniff detect report.docx
"""

from __future__ import annotations

from zipsniff.cli.main import cli

if __name__ == "__main__":
    cli()
