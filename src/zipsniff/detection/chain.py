# topmark:header:start
#
#   project      : ZipSniff
#   file         : chain.py
#   file_relpath : src/zipsniff/detection/chain.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Composition of detectors into an ordered chain.

Each detector in a chain either returns a media type or reports that it does
not apply to the input (`NOT_APPLICABLE`). The chain tries detectors in order
and returns the first applicable answer. Detectors must leave the handle
rewound so the next one sees the input from the start.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final, Protocol, Union, runtime_checkable

from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.mediatypes import UNKNOWN, MediaType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from zipsniff.io.handles import InputHandle

logger: ZipsniffLogger = get_logger(__name__)


class Applicability(Enum):
    """Sentinel type for detectors that do not apply to an input."""

    NOT_APPLICABLE = "not_applicable"

    def __bool__(self) -> bool:
        return False


NOT_APPLICABLE: Final[Applicability] = Applicability.NOT_APPLICABLE

Attempt = Union[MediaType, Applicability]


@runtime_checkable
class Detector(Protocol):
    """Anything that can take part in a `DetectorChain`."""

    def attempt(self, handle: InputHandle) -> Attempt:
        """Classify ``handle`` or return `NOT_APPLICABLE`.

        Implementations must rewind ``handle`` before returning.
        """
        ...


class DetectorChain:
    """Ordered list of detectors; the first applicable answer wins.

    Args:
        detectors (Iterable[Detector]): Detectors in evaluation order.
    """

    def __init__(self, detectors: Iterable[Detector]) -> None:
        self._detectors: tuple[Detector, ...] = tuple(detectors)

    @property
    def detectors(self) -> tuple[Detector, ...]:
        """The detectors in evaluation order."""
        return self._detectors

    def attempt(self, handle: InputHandle) -> Attempt:
        """Try each detector in turn.

        A chain is itself a `Detector`, so chains can be nested.
        """
        for detector in self._detectors:
            outcome: Attempt = detector.attempt(handle)
            if outcome is not NOT_APPLICABLE:
                logger.debug("%s classified the input as %s", type(detector).__name__, outcome)
                return outcome
        return NOT_APPLICABLE

    def detect(self, handle: InputHandle) -> MediaType:
        """Like `attempt`, but returns `zipsniff.mediatypes.UNKNOWN` when nothing applies."""
        outcome: Attempt = self.attempt(handle)
        if isinstance(outcome, MediaType):
            return outcome
        return UNKNOWN
