# topmark:header:start
#
#   project      : ZipSniff
#   file         : strategies_zipsniff.py
#   file_relpath : tests/strategies_zipsniff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for generating ZIP archives and raw inputs.

Entry names are drawn from a mix of well-known marker paths and random
paths, so generated archives exercise rule priorities without being
dominated by any single format.
"""

from __future__ import annotations

import zipfile
from collections.abc import Callable
from typing import Any

from hypothesis import strategies as st

from tests.archives import (
    DOCX_CONTENT_TYPES,
    GENERIC_CONTENT_TYPES,
    ODT_MIMETYPE,
    build_streamed_zip,
    build_zip,
)

Draw = Callable[[st.SearchStrategy[Any]], Any]

MARKER_ENTRIES: tuple[tuple[str, bytes], ...] = (
    ("mimetype", ODT_MIMETYPE),
    ("mimetype", b"application/epub+zip"),
    ("[Content_Types].xml", DOCX_CONTENT_TYPES),
    ("[Content_Types].xml", GENERIC_CONTENT_TYPES),
    ("word/document.xml", b"<w:document/>"),
    ("ppt/presentation.xml", b"<p:presentation/>"),
    ("xl/vbaProject.bin", b"\xd0\xcf\x11\xe0"),
    ("META-INF/MANIFEST.MF", b"Manifest-Version: 1.0\n"),
    ("WEB-INF/web.xml", b"<web-app/>"),
    ("classes.dex", b"dex\n035\x00"),
    ("AndroidManifest.xml", b"\x03\x00\x08\x00"),
    ("Index/Document.iwa", b"\x00"),
    ("doc.kml", b"<kml/>"),
)

_SEGMENT: st.SearchStrategy[str] = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-.",
    min_size=1,
    max_size=12,
).filter(lambda s: s not in (".", ".."))


@st.composite
def s_entry_name(draw: Draw) -> str:
    """A relative path of one to three segments."""
    segments: list[str] = draw(st.lists(_SEGMENT, min_size=1, max_size=3))
    return "/".join(segments)


@st.composite
def s_entries(draw: Draw, max_entries: int = 8) -> list[tuple[str, bytes]]:
    """A list of entries with unique names, mixing marker and random entries."""
    random_entry: st.SearchStrategy[tuple[str, bytes]] = st.tuples(
        s_entry_name(), st.binary(max_size=256)
    )
    entry: st.SearchStrategy[tuple[str, bytes]] = st.one_of(
        st.sampled_from(MARKER_ENTRIES), random_entry
    )
    return draw(st.lists(entry, max_size=max_entries, unique_by=lambda e: e[0]))


@st.composite
def s_archive(draw: Draw) -> bytes:
    """A well-formed archive, either sized or with data descriptors."""
    entries: list[tuple[str, bytes]] = draw(s_entries())
    compression: int = draw(st.sampled_from((zipfile.ZIP_STORED, zipfile.ZIP_DEFLATED)))
    if draw(st.booleans()):
        return build_streamed_zip(entries, compression=compression)
    return build_zip(entries, compression=compression)


@st.composite
def s_corrupted_archive(draw: Draw) -> bytes:
    """A well-formed archive with a few bytes overwritten or the tail cut off."""
    data = bytearray(draw(s_archive()))
    if draw(st.booleans()):
        cut: int = draw(st.integers(min_value=4, max_value=max(4, len(data))))
        return bytes(data[:cut])
    flips: list[tuple[int, int]] = draw(
        st.lists(
            st.tuples(st.integers(min_value=4, max_value=len(data) - 1), st.integers(0, 255)),
            max_size=6,
        )
    )
    for index, value in flips:
        data[index] = value
    return bytes(data)


def s_raw_input() -> st.SearchStrategy[bytes]:
    """Arbitrary bytes, sometimes starting with a local header signature."""
    return st.one_of(
        st.binary(max_size=512),
        st.binary(max_size=512).map(lambda b: b"PK\x03\x04" + b),
        st.binary(max_size=128).map(lambda b: b"PK\x05\x06" + b),
    )
