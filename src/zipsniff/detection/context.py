# topmark:header:start
#
#   project      : ZipSniff
#   file         : context.py
#   file_relpath : src/zipsniff/detection/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-call mutable detection state.

A `DetectionContext` is created for every detection call and never shared.
It accumulates the best rule match seen so far across entries and carries
the counters reported in `zipsniff.detection.state.DetectionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from zipsniff.catalog.base import Priority
from zipsniff.config.logging import ZipsniffLogger, get_logger

if TYPE_CHECKING:
    from zipsniff.catalog.catalog import Classification, SignatureCatalog
    from zipsniff.mediatypes import MediaType

logger: ZipsniffLogger = get_logger(__name__)


@dataclass
class DetectionContext:
    """Accumulator for one detection call.

    Attributes:
        bytes_consumed (int): Furthest input position reached by the scan.
        entries_seen (int): Number of entries inspected.
        best (Classification | None): Best match so far.
        definitive (bool): True once a DEFINITIVE match was offered; scanning stops.
    """

    bytes_consumed: int = 0
    entries_seen: int = 0
    best: Classification | None = None
    definitive: bool = False

    @property
    def media_type(self) -> MediaType | None:
        """Media type of the best match, if any."""
        return None if self.best is None else self.best.media_type

    def offer(self, candidate: Classification | None) -> bool:
        """Consider a rule match for the current entry.

        The candidate replaces the current best when its priority is strictly
        higher, or equal with a lower declaration index. Once a definitive
        match was accepted, later offers are ignored.

        Args:
            candidate (Classification | None): Match to consider (``None`` is ignored).

        Returns:
            bool: True if the candidate became the new best match.
        """
        if candidate is None or self.definitive:
            return False
        best: Classification | None = self.best
        if best is not None:
            if candidate.priority < best.priority:
                return False
            if candidate.priority == best.priority and candidate.index >= best.index:
                return False
        self.best = candidate
        if candidate.priority >= Priority.DEFINITIVE:
            self.definitive = True
        logger.trace(
            "New best candidate %s (%s, priority %d)",
            candidate.rule.name,
            candidate.media_type,
            candidate.priority,
        )
        return True

    def inspect(
        self,
        catalog: SignatureCatalog,
        entry_name: str,
        fragment: bytes | None = None,
    ) -> bool:
        """Classify one entry with ``catalog`` and offer the result.

        Returns:
            bool: True if the entry produced a new best match.
        """
        self.entries_seen += 1
        return self.offer(catalog.classify(entry_name, fragment))
