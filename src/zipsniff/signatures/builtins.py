# topmark:header:start
#
#   project      : ZipSniff
#   file         : builtins.py
#   file_relpath : src/zipsniff/signatures/builtins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Built-in byte signatures checked before any container logic runs.

These catch inputs an upstream dispatcher routed to the ZIP detector although
they are something else entirely. TIFF is the motivating case: its two-byte
endianness marker followed by the magic number 42 is sometimes confused with
container input, and must never be reported as a ZIP type.

Exports:
    BYTE_SIGNATURES (list[ByteSignature]): Declaration order is match order.

Notes:
    No ZIP signature may ever appear here; the prefilter runs before the ZIP
    magic check and would otherwise short-circuit every container.
"""

from __future__ import annotations

from zipsniff.mediatypes import MediaType
from zipsniff.signatures.base import ByteSignature

BYTE_SIGNATURES: list[ByteSignature] = [
    # ── TIFF ── "II" / "MM" byte order marker, then 42 (classic) or 43 (BigTIFF)
    ByteSignature(
        name="tiff_le",
        media_type=MediaType.image("tiff"),
        pattern=b"II\x2a\x00",
        description="TIFF image (little-endian)",
    ),
    ByteSignature(
        name="tiff_be",
        media_type=MediaType.image("tiff"),
        pattern=b"MM\x00\x2a",
        description="TIFF image (big-endian)",
    ),
    ByteSignature(
        name="bigtiff_le",
        media_type=MediaType.image("tiff"),
        pattern=b"II\x2b\x00",
        description="BigTIFF image (little-endian)",
    ),
    ByteSignature(
        name="bigtiff_be",
        media_type=MediaType.image("tiff"),
        pattern=b"MM\x00\x2b",
        description="BigTIFF image (big-endian)",
    ),
    # ── Other still images ──
    ByteSignature(
        name="png",
        media_type=MediaType.image("png"),
        pattern=b"\x89PNG\r\n\x1a\n",
        description="PNG image",
    ),
    ByteSignature(
        name="jpeg",
        media_type=MediaType.image("jpeg"),
        pattern=b"\xff\xd8\xff",
        description="JPEG image",
    ),
    ByteSignature(
        name="gif87a",
        media_type=MediaType.image("gif"),
        pattern=b"GIF87a",
        description="GIF image (87a)",
    ),
    ByteSignature(
        name="gif89a",
        media_type=MediaType.image("gif"),
        pattern=b"GIF89a",
        description="GIF image (89a)",
    ),
    ByteSignature(
        name="bmp",
        media_type=MediaType.image("bmp"),
        pattern=b"BM",
        description="Windows bitmap",
    ),
    ByteSignature(
        name="webp",
        media_type=MediaType.image("webp"),
        pattern=b"RIFF",
        also=((8, b"WEBP"),),
        description="WebP image (RIFF container)",
    ),
    # ── Documents ──
    ByteSignature(
        name="pdf",
        media_type=MediaType.application("pdf"),
        pattern=b"%PDF-",
        description="PDF document",
    ),
    ByteSignature(
        name="postscript",
        media_type=MediaType.application("postscript"),
        pattern=b"%!PS",
        description="PostScript document",
    ),
    ByteSignature(
        name="ole2",
        media_type=MediaType.application("x-tika-msoffice"),
        pattern=b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",
        description="OLE2 compound document (legacy Microsoft Office)",
    ),
    # ── Non-ZIP archives ──
    ByteSignature(
        name="gzip",
        media_type=MediaType.application("gzip"),
        pattern=b"\x1f\x8b",
        description="gzip stream",
    ),
    ByteSignature(
        name="7z",
        media_type=MediaType.application("x-7z-compressed"),
        pattern=b"7z\xbc\xaf\x27\x1c",
        description="7-Zip archive",
    ),
    ByteSignature(
        name="rar",
        media_type=MediaType.application("x-rar-compressed"),
        pattern=b"Rar!\x1a\x07",
        description="RAR archive",
    ),
]
