# topmark:header:start
#
#   project      : ZipSniff
#   file         : state.py
#   file_relpath : src/zipsniff/detection/state.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Detection states, strategies and the result record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from zipsniff.mediatypes import MediaType


class DetectionState(Enum):
    """States of the detection state machine.

    ``START -> PREFILTER_CHECKED -> CONTAINER_CONFIRMED -> SCANNING`` are
    transient. Every call ends in exactly one of the terminal states.

    Attributes:
        START: Nothing read yet.
        PREFILTER_CHECKED: The byte signature table found no non-container format.
        CONTAINER_CONFIRMED: The input starts with ZIP magic.
        SCANNING: Entries are being enumerated.
        DEFINITIVE_MATCH: A byte signature or a DEFINITIVE rule decided the type.
        CANDIDATE_MATCH: Entries were exhausted; the best non-definitive rule decided.
        GENERIC_FALLBACK: A valid container with no recognized entries.
        UNKNOWN: Not a container, or the container could not be read.
    """

    START = "start"
    PREFILTER_CHECKED = "prefilter_checked"
    CONTAINER_CONFIRMED = "container_confirmed"
    SCANNING = "scanning"
    DEFINITIVE_MATCH = "definitive_match"
    CANDIDATE_MATCH = "candidate_match"
    GENERIC_FALLBACK = "generic_fallback"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        """True for states a detection call can end in."""
        return self in _TERMINAL_STATES


_TERMINAL_STATES: frozenset[DetectionState] = frozenset(
    {
        DetectionState.DEFINITIVE_MATCH,
        DetectionState.CANDIDATE_MATCH,
        DetectionState.GENERIC_FALLBACK,
        DetectionState.UNKNOWN,
    }
)


class Strategy(Enum):
    """How the container was enumerated.

    Attributes:
        NONE: No container logic ran (prefilter hit, or no ZIP magic).
        STREAMING: Local headers were scanned sequentially.
        CENTRAL_DIRECTORY: The central directory was walked.
    """

    NONE = "none"
    STREAMING = "streaming"
    CENTRAL_DIRECTORY = "central_directory"


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one detection call.

    Attributes:
        media_type (MediaType): Detected type (``application/octet-stream`` when unknown).
        state (DetectionState): Terminal state.
        strategy (Strategy): Enumeration strategy that produced the result.
        rule (str | None): Name of the deciding byte signature or catalog rule.
        entries_inspected (int): Number of container entries inspected.
        bytes_consumed (int): Furthest input position the scan reached.
    """

    media_type: MediaType
    state: DetectionState
    strategy: Strategy = Strategy.NONE
    rule: str | None = None
    entries_inspected: int = 0
    bytes_consumed: int = 0

    @property
    def is_unknown(self) -> bool:
        """True if the input could not be classified."""
        return self.state is DetectionState.UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the result."""
        return {
            "media_type": str(self.media_type),
            "state": self.state.value,
            "strategy": self.strategy.value,
            "rule": self.rule,
            "entries_inspected": self.entries_inspected,
            "bytes_consumed": self.bytes_consumed,
        }
