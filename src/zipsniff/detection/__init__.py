# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/detection/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Detection orchestration: per-call context, state machine and detector chains."""

from __future__ import annotations

from zipsniff.detection.chain import NOT_APPLICABLE, Detector, DetectorChain
from zipsniff.detection.context import DetectionContext
from zipsniff.detection.orchestrator import ZipContainerDetector
from zipsniff.detection.state import DetectionResult, DetectionState, Strategy

__all__ = [
    "NOT_APPLICABLE",
    "DetectionContext",
    "DetectionResult",
    "DetectionState",
    "Detector",
    "DetectorChain",
    "Strategy",
    "ZipContainerDetector",
]
