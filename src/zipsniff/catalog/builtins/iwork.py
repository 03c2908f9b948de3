# topmark:header:start
#
#   project      : ZipSniff
#   file         : iwork.py
#   file_relpath : src/zipsniff/catalog/builtins/iwork.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Apple iWork packages.

iWork '09 documents keep an XML index whose root element names the
application. Pages and Numbers share the ``index.xml`` entry name, so the
root element (read from the decoded fragment) tells them apart. These
entries are often stored deep inside the package, after previews and media:
with a small mark limit a streaming scan never reaches them and the package
degrades to ``application/zip``.

iWork 2013 and later store protobuf-based ``.iwa`` archives under
``Index/``; only Keynote and Numbers have a distinguishing part.

Exports:
    RULES: iWork '09 and iWork 2013 rules.
"""

from __future__ import annotations

from typing import Final

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.mediatypes import MediaType

KEYNOTE: Final[MediaType] = MediaType.application("vnd.apple.keynote")
PAGES: Final[MediaType] = MediaType.application("vnd.apple.pages")
NUMBERS: Final[MediaType] = MediaType.application("vnd.apple.numbers")

IWORK13: Final[MediaType] = MediaType.application("vnd.apple.unknown.13")
KEYNOTE13: Final[MediaType] = MediaType.application("vnd.apple.keynote.13")
NUMBERS13: Final[MediaType] = MediaType.application("vnd.apple.numbers.13")

RULES: list[SignatureRule] = [
    # ── iWork '09 ──
    SignatureRule(
        name="keynote_09",
        media_type=KEYNOTE,
        priority=Priority.DEFINITIVE,
        entry_name="index.apxl",
        description="Keynote '09 presentation",
    ),
    SignatureRule(
        name="pages_09",
        media_type=PAGES,
        priority=Priority.DEFINITIVE,
        entry_name="index.xml",
        content_contains=b"<sl:document",
        description="Pages '09 document",
    ),
    SignatureRule(
        name="numbers_09",
        media_type=NUMBERS,
        priority=Priority.DEFINITIVE,
        entry_name="index.xml",
        content_contains=b"<ls:document",
        description="Numbers '09 spreadsheet",
    ),
    # ── iWork 2013+ ──
    SignatureRule(
        name="keynote_13",
        media_type=KEYNOTE13,
        priority=Priority.SPECIFIC,
        entry_pattern=r"Index/MasterSlide.*\.iwa",
        parent=IWORK13,
        description="Keynote (iWork 2013) presentation",
    ),
    SignatureRule(
        name="numbers_13",
        media_type=NUMBERS13,
        priority=Priority.SPECIFIC,
        entry_name="Index/CalculationEngine.iwa",
        parent=IWORK13,
        description="Numbers (iWork 2013) spreadsheet",
    ),
    SignatureRule(
        name="iwork_13",
        media_type=IWORK13,
        priority=Priority.FAMILY,
        entry_name="Index/Document.iwa",
        description="iWork 2013 package (application not identified)",
    ),
]
