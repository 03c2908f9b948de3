# topmark:header:start
#
#   project      : ZipSniff
#   file         : ooxml.py
#   file_relpath : src/zipsniff/catalog/builtins/ooxml.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Office Open XML (OPC) packages and XPS documents.

Every OPC package carries a ``[Content_Types].xml`` part. Its presence alone
only identifies the family; the content type it declares for the main part
identifies the concrete format. When ``[Content_Types].xml`` cannot be read
(streaming past the mark limit, unsupported compression), the well-known main
part names act as a fallback.

Exports:
    RULES: Family hint, main-part content type rules, main-part name rules,
        macro variant rules and the XPS name rule.
"""

from __future__ import annotations

from typing import Final

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.mediatypes import MediaType

CONTENT_TYPES_ENTRY: Final[str] = "[Content_Types].xml"

OOXML_FAMILY: Final[MediaType] = MediaType.application("x-tika-ooxml")

DOCX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.wordprocessingml.document"
)
DOCM: Final[MediaType] = MediaType.application("vnd.ms-word.document.macroenabled.12")
DOTX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.wordprocessingml.template"
)
DOTM: Final[MediaType] = MediaType.application("vnd.ms-word.template.macroenabled.12")
XLSX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)
XLSM: Final[MediaType] = MediaType.application("vnd.ms-excel.sheet.macroenabled.12")
XLTX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.spreadsheetml.template"
)
XLTM: Final[MediaType] = MediaType.application("vnd.ms-excel.template.macroenabled.12")
XLSB: Final[MediaType] = MediaType.application("vnd.ms-excel.sheet.binary.macroenabled.12")
XLAM: Final[MediaType] = MediaType.application("vnd.ms-excel.addin.macroenabled.12")
PPTX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.presentationml.presentation"
)
PPTM: Final[MediaType] = MediaType.application("vnd.ms-powerpoint.presentation.macroenabled.12")
POTX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.presentationml.template"
)
POTM: Final[MediaType] = MediaType.application("vnd.ms-powerpoint.template.macroenabled.12")
PPSX: Final[MediaType] = MediaType.application(
    "vnd.openxmlformats-officedocument.presentationml.slideshow"
)
PPSM: Final[MediaType] = MediaType.application("vnd.ms-powerpoint.slideshow.macroenabled.12")
PPAM: Final[MediaType] = MediaType.application("vnd.ms-powerpoint.addin.macroenabled.12")
VSDX: Final[MediaType] = MediaType.application("vnd.ms-visio.drawing")
VSDM: Final[MediaType] = MediaType.application("vnd.ms-visio.drawing.macroenabled.12")
XPS: Final[MediaType] = MediaType.application("vnd.ms-xpsdocument")

_OPENXML: Final[str] = "application/vnd.openxmlformats-officedocument."

# Main-part content type declared in [Content_Types].xml -> package type.
_MAIN_PART_TYPES: Final[tuple[tuple[str, str, MediaType], ...]] = (
    ("docx", _OPENXML + "wordprocessingml.document.main+xml", DOCX),
    ("docm", "application/vnd.ms-word.document.macroEnabled.main+xml", DOCM),
    ("dotx", _OPENXML + "wordprocessingml.template.main+xml", DOTX),
    ("dotm", "application/vnd.ms-word.template.macroEnabledTemplate.main+xml", DOTM),
    ("xlsx", _OPENXML + "spreadsheetml.sheet.main+xml", XLSX),
    ("xlsm", "application/vnd.ms-excel.sheet.macroEnabled.main+xml", XLSM),
    ("xltx", _OPENXML + "spreadsheetml.template.main+xml", XLTX),
    ("xltm", "application/vnd.ms-excel.template.macroEnabled.main+xml", XLTM),
    ("xlsb", "application/vnd.ms-excel.sheet.binary.macroEnabled.main", XLSB),
    ("xlam", "application/vnd.ms-excel.addin.macroEnabled.main+xml", XLAM),
    ("pptx", _OPENXML + "presentationml.presentation.main+xml", PPTX),
    ("pptm", "application/vnd.ms-powerpoint.presentation.macroEnabled.main+xml", PPTM),
    ("potx", _OPENXML + "presentationml.template.main+xml", POTX),
    ("potm", "application/vnd.ms-powerpoint.template.macroEnabled.main+xml", POTM),
    ("ppsx", _OPENXML + "presentationml.slideshow.main+xml", PPSX),
    ("ppsm", "application/vnd.ms-powerpoint.slideshow.macroEnabled.main+xml", PPSM),
    ("ppam", "application/vnd.ms-powerpoint.addin.macroEnabled.main+xml", PPAM),
    ("vsdx", "application/vnd.ms-visio.drawing.main+xml", VSDX),
    ("vsdm", "application/vnd.ms-visio.drawing.macroEnabled.main+xml", VSDM),
    ("xps", "application/vnd.ms-package.xps-fixeddocumentsequence+xml", XPS),
)


def _parent_of(media_type: MediaType) -> MediaType | None:
    # XPS is an OPC package but not an Office document.
    return None if media_type == XPS else OOXML_FAMILY


RULES: list[SignatureRule] = [
    # Content rules come first so they win ties against name rules of the same entry.
    *(
        SignatureRule(
            name=f"ooxml_content_{name}",
            media_type=media_type,
            priority=Priority.DEFINITIVE,
            entry_name=CONTENT_TYPES_ENTRY,
            # The closing quote keeps e.g. "...sheet.main+xml" from matching a longer type.
            content_contains=f'"{content_type}"'.encode("ascii"),
            parent=_parent_of(media_type),
            description=f"OPC package whose main part is {content_type}",
        )
        for name, content_type, media_type in _MAIN_PART_TYPES
    ),
    SignatureRule(
        name="ooxml_content_types",
        media_type=OOXML_FAMILY,
        priority=Priority.FAMILY,
        entry_name=CONTENT_TYPES_ENTRY,
        description="Office Open XML package (type not yet known)",
    ),
    # ── Main parts by name ──
    SignatureRule(
        name="docx_main_part",
        media_type=DOCX,
        priority=Priority.SPECIFIC,
        entry_name="word/document.xml",
        parent=OOXML_FAMILY,
        description="Word document main part",
    ),
    SignatureRule(
        name="xlsx_main_part",
        media_type=XLSX,
        priority=Priority.SPECIFIC,
        entry_name="xl/workbook.xml",
        parent=OOXML_FAMILY,
        description="Excel workbook main part",
    ),
    SignatureRule(
        name="xlsb_main_part",
        media_type=XLSB,
        priority=Priority.SPECIFIC,
        entry_name="xl/workbook.bin",
        parent=OOXML_FAMILY,
        description="Excel binary workbook main part",
    ),
    SignatureRule(
        name="pptx_main_part",
        media_type=PPTX,
        priority=Priority.SPECIFIC,
        entry_name="ppt/presentation.xml",
        parent=OOXML_FAMILY,
        description="PowerPoint presentation main part",
    ),
    SignatureRule(
        name="vsdx_main_part",
        media_type=VSDX,
        priority=Priority.SPECIFIC,
        entry_name="visio/document.xml",
        parent=OOXML_FAMILY,
        description="Visio drawing main part",
    ),
    # ── Macro-enabled variants ──
    SignatureRule(
        name="docm_vba_project",
        media_type=DOCM,
        priority=Priority.SPECIFIC_VARIANT,
        entry_name="word/vbaProject.bin",
        parent=OOXML_FAMILY,
        description="Macro-enabled Word document",
    ),
    SignatureRule(
        name="xlsm_vba_project",
        media_type=XLSM,
        priority=Priority.SPECIFIC_VARIANT,
        entry_name="xl/vbaProject.bin",
        parent=OOXML_FAMILY,
        description="Macro-enabled Excel workbook",
    ),
    SignatureRule(
        name="pptm_vba_project",
        media_type=PPTM,
        priority=Priority.SPECIFIC_VARIANT,
        entry_name="ppt/vbaProject.bin",
        parent=OOXML_FAMILY,
        description="Macro-enabled PowerPoint presentation",
    ),
    SignatureRule(
        name="vsdm_vba_project",
        media_type=VSDM,
        priority=Priority.SPECIFIC_VARIANT,
        entry_name="visio/vbaProject.bin",
        parent=OOXML_FAMILY,
        description="Macro-enabled Visio drawing",
    ),
    # ── XPS ──
    SignatureRule(
        name="xps_document_sequence",
        media_type=XPS,
        priority=Priority.SPECIFIC,
        entry_suffix=".fdseq",
        description="XPS fixed document sequence part",
    ),
]
