# topmark:header:start
#
#   project      : ZipSniff
#   file         : misc.py
#   file_relpath : src/zipsniff/catalog/builtins/misc.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZIP-based formats that do not belong to a larger family.

Exports:
    RULES: Google Earth KMZ.
"""

from __future__ import annotations

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.mediatypes import MediaType

RULES: list[SignatureRule] = [
    SignatureRule(
        name="kmz",
        media_type=MediaType.application("vnd.google-earth.kmz"),
        priority=Priority.SPECIFIC,
        entry_name="doc.kml",
        description="Google Earth KMZ archive",
    ),
]
