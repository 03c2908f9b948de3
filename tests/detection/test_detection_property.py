# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_detection_property.py
#   file_relpath : tests/detection/test_detection_property.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Property tests for detection over generated archives and raw bytes.

Asserted for every input:
1) detection never raises and always ends in a terminal state,
2) the handle is rewound to its start afterwards,
3) repeating detection on the same handle gives the same result, and
4) for well-formed archives, seekable and streaming detection agree.
"""

from __future__ import annotations

import io

import pytest
from hypothesis import HealthCheck, given, settings

from tests.strategies_zipsniff import s_archive, s_corrupted_archive, s_raw_input
from zipsniff.detection.orchestrator import ZipContainerDetector
from zipsniff.detection.state import DetectionResult
from zipsniff.io.handles import BoundedPrefixBuffer, SeekableInput

# Mark the entire test module
pytestmark: pytest.MarkDecorator = pytest.mark.hypothesis_slow

DETECTOR = ZipContainerDetector()

_SETTINGS = settings(
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
    max_examples=100,
)


@_SETTINGS
@given(data=s_archive())
def test_seekable_and_streaming_agree(data: bytes) -> None:
    """Both strategies see the same entries in the same order for a sound archive."""
    seekable: DetectionResult = DETECTOR.detect(SeekableInput.from_bytes(data))
    streaming: DetectionResult = DETECTOR.detect(BoundedPrefixBuffer(io.BytesIO(data)))
    assert seekable.media_type == streaming.media_type
    assert seekable.state is streaming.state
    assert seekable.rule == streaming.rule


@_SETTINGS
@given(data=s_archive())
def test_detection_is_idempotent(data: bytes) -> None:
    for handle in (SeekableInput.from_bytes(data), BoundedPrefixBuffer(io.BytesIO(data))):
        first: DetectionResult = DETECTOR.detect(handle)
        assert handle.tell() == 0
        second: DetectionResult = DETECTOR.detect(handle)
        assert first == second


@_SETTINGS
@given(data=s_corrupted_archive())
def test_corrupted_archives_never_raise(data: bytes) -> None:
    for handle in (SeekableInput.from_bytes(data), BoundedPrefixBuffer(io.BytesIO(data))):
        result: DetectionResult = DETECTOR.detect(handle)
        assert result.state.is_terminal
        assert handle.tell() == 0


@_SETTINGS
@given(data=s_raw_input())
def test_raw_bytes_never_raise(data: bytes) -> None:
    for handle in (
        SeekableInput.from_bytes(data),
        BoundedPrefixBuffer(io.BytesIO(data), mark_limit=256),
    ):
        result: DetectionResult = DETECTOR.detect(handle)
        assert result.state.is_terminal
        assert handle.tell() == 0
