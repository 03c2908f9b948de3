# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_scanner.py
#   file_relpath : tests/container/test_scanner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the bounded sequential entry scanner."""

from __future__ import annotations

import io
import zipfile
from typing import TYPE_CHECKING

import pytest

from tests.archives import (
    ODT_MIMETYPE,
    build_streamed_zip,
    build_zip,
    local_header,
    padding_entry,
)
from tests.conftest import make_config
from zipsniff.catalog.catalog import get_signature_catalog
from zipsniff.container.scanner import BoundedEntryScanner, ScannedEntry, StopReason
from zipsniff.detection.context import DetectionContext
from zipsniff.errors import MalformedContainerError
from zipsniff.io.handles import BoundedPrefixBuffer

if TYPE_CHECKING:
    from zipsniff.config.model import DetectorConfig


def _scan(
    data: bytes,
    *,
    mark_limit: int = 1 << 20,
    config: DetectorConfig | None = None,
    context: DetectionContext | None = None,
) -> tuple[BoundedEntryScanner, list[ScannedEntry], BoundedPrefixBuffer]:
    handle = BoundedPrefixBuffer(io.BytesIO(data), mark_limit=mark_limit)
    scanner = BoundedEntryScanner(
        handle, get_signature_catalog(), config or make_config(mark_limit=mark_limit)
    )
    entries: list[ScannedEntry] = list(scanner.scan(context or DetectionContext()))
    return scanner, entries, handle


def test_scan_yields_entries_in_order_until_central_directory() -> None:
    archive: bytes = build_zip([("a.txt", b"a" * 100), ("b/c.txt", b"c"), ("d/", b"")])
    scanner, entries, _ = _scan(archive)
    assert [e.descriptor.name for e in entries] == ["a.txt", "b/c.txt", "d/"]
    assert scanner.stop_reason is StopReason.CENTRAL_DIRECTORY


def test_scan_decodes_fragments_only_for_content_rules() -> None:
    archive: bytes = build_zip([("mimetype", ODT_MIMETYPE), ("content.xml", b"<x/>")])
    _, entries, _ = _scan(archive)
    assert entries[0].fragment == ODT_MIMETYPE
    assert entries[1].fragment is None


def test_scan_handles_deflated_data_descriptor_entries() -> None:
    archive: bytes = build_streamed_zip(
        [("mimetype", ODT_MIMETYPE), ("content.xml", b"<office:document/>" * 50)]
    )
    scanner, entries, _ = _scan(archive)
    assert [e.descriptor.name for e in entries] == ["mimetype", "content.xml"]
    assert entries[0].descriptor.has_data_descriptor
    assert entries[0].fragment == ODT_MIMETYPE
    assert scanner.stop_reason is StopReason.CENTRAL_DIRECTORY


def test_scan_delimits_stored_data_descriptor_entries() -> None:
    archive: bytes = build_streamed_zip(
        [("a.txt", b"aaa PK\x07\x08 aaa"), ("mimetype", ODT_MIMETYPE), ("b.txt", b"bbb")],
        compression=zipfile.ZIP_STORED,
    )
    scanner, entries, _ = _scan(archive)
    assert [e.descriptor.name for e in entries] == ["a.txt", "mimetype", "b.txt"]
    assert entries[1].fragment == ODT_MIMETYPE
    assert scanner.stop_reason is StopReason.CENTRAL_DIRECTORY


def test_scan_stops_when_undelimited_entry_exceeds_ceiling() -> None:
    archive: bytes = build_streamed_zip(
        [padding_entry("noise.bin", 4096), ("b.txt", b"bbb")],
        compression=zipfile.ZIP_DEFLATED,
    )
    scanner, entries, _ = _scan(archive, config=make_config(max_marker_compressed_size=512))
    assert [e.descriptor.name for e in entries] == ["noise.bin"]
    assert entries[0].fragment is None
    assert scanner.stop_reason is StopReason.DECODE_CEILING


def test_scan_never_reads_past_mark_limit() -> None:
    archive: bytes = build_zip(
        [padding_entry("big.bin", 4096), ("AndroidManifest.xml", b"<manifest/>")],
        stored=("big.bin",),
    )
    scanner, entries, handle = _scan(archive, mark_limit=1024)
    # The first header fits; its data crosses the budget.
    assert [e.descriptor.name for e in entries] == ["big.bin"]
    assert scanner.stop_reason is StopReason.MARK_LIMIT
    assert handle.tell() <= 1024
    handle.rewind()


def test_scan_does_not_inspect_header_crossing_mark_limit() -> None:
    archive: bytes = build_zip([("a.txt", b"a"), ("AndroidManifest.xml", b"<manifest/>")])
    first_entry_end: int = archive.index(b"PK\x03\x04", 4)
    scanner, entries, _ = _scan(archive, mark_limit=first_entry_end + 40)
    assert [e.descriptor.name for e in entries] == ["a.txt"]
    assert scanner.stop_reason is StopReason.MARK_LIMIT


def test_scan_stops_when_context_is_definitive() -> None:
    archive: bytes = build_zip([("a.txt", b"a"), ("b.txt", b"b")])
    handle = BoundedPrefixBuffer(io.BytesIO(archive), mark_limit=1 << 20)
    scanner = BoundedEntryScanner(handle, get_signature_catalog(), make_config())
    context = DetectionContext()
    names: list[str] = []
    for scanned in scanner.scan(context):
        names.append(scanned.descriptor.name)
        context.definitive = True
    assert names == ["a.txt"]
    assert scanner.stop_reason is StopReason.DEFINITIVE


def test_scan_honors_max_entries() -> None:
    archive: bytes = build_zip([(f"f{i}.txt", b"x") for i in range(10)])
    context = DetectionContext()
    handle = BoundedPrefixBuffer(io.BytesIO(archive), mark_limit=1 << 20)
    scanner = BoundedEntryScanner(handle, get_signature_catalog(), make_config(max_entries=3))
    seen = 0
    for scanned in scanner.scan(context):
        context.inspect(get_signature_catalog(), scanned.descriptor.name, scanned.fragment)
        seen += 1
    assert seen == 3
    assert scanner.stop_reason is StopReason.MAX_ENTRIES


def test_scan_end_of_input_at_record_boundary() -> None:
    data: bytes = local_header("a.txt", b"hello") + local_header("b.txt", b"world")
    scanner, entries, _ = _scan(data)
    assert len(entries) == 2
    assert scanner.stop_reason is StopReason.END_OF_INPUT


def test_scan_end_of_input_inside_entry_data() -> None:
    data: bytes = local_header("a.txt", b"hello world")[:-4]
    scanner, entries, _ = _scan(data)
    assert [e.descriptor.name for e in entries] == ["a.txt"]
    assert scanner.stop_reason is StopReason.END_OF_INPUT


def test_scan_rejects_garbage_between_entries() -> None:
    data: bytes = local_header("a.txt", b"hello") + b"GARBAGE!"
    with pytest.raises(MalformedContainerError, match="Unexpected record signature"):
        _scan(data)


def test_scan_rejects_truncated_header() -> None:
    data: bytes = local_header("a.txt", b"hello") + b"PK\x03\x04\x14\x00"
    with pytest.raises(MalformedContainerError, match="Truncated"):
        _scan(data)


def test_scan_rejects_partial_signature() -> None:
    data: bytes = local_header("a.txt", b"hello") + b"PK"
    with pytest.raises(MalformedContainerError, match="Truncated record signature"):
        _scan(data)


def test_scan_keeps_bytes_consumed_current() -> None:
    archive: bytes = build_zip([("a.txt", b"a" * 10)])
    context = DetectionContext()
    _, _, handle = _scan(archive, context=context)
    assert context.bytes_consumed == handle.tell()
    assert 0 < context.bytes_consumed < len(archive)


def test_budget_is_the_smaller_of_config_and_handle_limits() -> None:
    handle = BoundedPrefixBuffer(io.BytesIO(b""), mark_limit=100)
    scanner = BoundedEntryScanner(handle, get_signature_catalog(), make_config(mark_limit=500))
    assert scanner.budget == 100
