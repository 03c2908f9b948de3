# topmark:header:start
#
#   project      : ZipSniff
#   file         : odf.py
#   file_relpath : src/zipsniff/catalog/builtins/odf.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Packages identified by a stored ``mimetype`` entry.

OpenDocument, EPUB, IDML and iBooks Author packages all begin with an
uncompressed ``mimetype`` entry whose content is the package's media type.
The entry name is shared by every format in this group; only the content
distinguishes them, so every rule here carries a ``content_equals`` predicate.

Exports:
    RULES: One DEFINITIVE rule per recognized ``mimetype`` value.
"""

from __future__ import annotations

from typing import Final

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.mediatypes import MediaType

MIMETYPE_ENTRY: Final[str] = "mimetype"

# (rule name, media type subtype, description)
_OPENDOCUMENT: Final[tuple[tuple[str, str, str], ...]] = (
    ("odt", "vnd.oasis.opendocument.text", "OpenDocument text"),
    ("ott", "vnd.oasis.opendocument.text-template", "OpenDocument text template"),
    ("odm", "vnd.oasis.opendocument.text-master", "OpenDocument master document"),
    (
        "otm",
        "vnd.oasis.opendocument.text-master-template",
        "OpenDocument master document template",
    ),
    ("oth", "vnd.oasis.opendocument.text-web", "OpenDocument HTML template"),
    ("ods", "vnd.oasis.opendocument.spreadsheet", "OpenDocument spreadsheet"),
    ("ots", "vnd.oasis.opendocument.spreadsheet-template", "OpenDocument spreadsheet template"),
    ("odp", "vnd.oasis.opendocument.presentation", "OpenDocument presentation"),
    (
        "otp",
        "vnd.oasis.opendocument.presentation-template",
        "OpenDocument presentation template",
    ),
    ("odg", "vnd.oasis.opendocument.graphics", "OpenDocument drawing"),
    ("otg", "vnd.oasis.opendocument.graphics-template", "OpenDocument drawing template"),
    ("odc", "vnd.oasis.opendocument.chart", "OpenDocument chart"),
    ("otc", "vnd.oasis.opendocument.chart-template", "OpenDocument chart template"),
    ("odf", "vnd.oasis.opendocument.formula", "OpenDocument formula"),
    ("otf", "vnd.oasis.opendocument.formula-template", "OpenDocument formula template"),
    ("odb", "vnd.oasis.opendocument.base", "OpenDocument database"),
    ("odi", "vnd.oasis.opendocument.image", "OpenDocument image"),
    ("oti", "vnd.oasis.opendocument.image-template", "OpenDocument image template"),
    # OpenOffice.org 1.x packages use the same convention
    ("sxw", "vnd.sun.xml.writer", "OpenOffice.org 1.x text"),
    ("sxc", "vnd.sun.xml.calc", "OpenOffice.org 1.x spreadsheet"),
    ("sxi", "vnd.sun.xml.impress", "OpenOffice.org 1.x presentation"),
    ("sxd", "vnd.sun.xml.draw", "OpenOffice.org 1.x drawing"),
)


def _mimetype_rule(name: str, media_type: MediaType, description: str) -> SignatureRule:
    return SignatureRule(
        name=name,
        media_type=media_type,
        priority=Priority.DEFINITIVE,
        entry_name=MIMETYPE_ENTRY,
        content_equals=str(media_type).encode("ascii"),
        description=description,
    )


RULES: list[SignatureRule] = [
    *(
        _mimetype_rule(name, MediaType.application(subtype), description)
        for name, subtype, description in _OPENDOCUMENT
    ),
    _mimetype_rule("epub", MediaType.application("epub+zip"), "EPUB publication"),
    _mimetype_rule(
        "idml",
        MediaType.application("vnd.adobe.indesign-idml-package"),
        "InDesign markup package",
    ),
    _mimetype_rule("ibooks", MediaType.application("x-ibooks+zip"), "iBooks Author book"),
]
