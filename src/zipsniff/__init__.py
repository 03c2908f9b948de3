# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff package.

ZipSniff identifies ZIP-based file formats (OOXML, ODF, EPUB, Java archives,
APK/IPA, iWork and more) from their leading bytes and container entries,
within strict resource bounds. It exposes a small typed API
(`zipsniff.api`) and a CLI (``zipsniff``).
"""

from __future__ import annotations

from zipsniff.api import detect, is_zip_based, sniff
from zipsniff.constants import ZIPSNIFF_VERSION

__version__: str = ZIPSNIFF_VERSION

__all__ = [
    "__version__",
    "detect",
    "is_zip_based",
    "sniff",
]
