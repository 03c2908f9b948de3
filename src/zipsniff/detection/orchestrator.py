# topmark:header:start
#
#   project      : ZipSniff
#   file         : orchestrator.py
#   file_relpath : src/zipsniff/detection/orchestrator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""The ZIP container detector.

`ZipContainerDetector.detect` drives one detection call through the state
machine::

    START -> PREFILTER_CHECKED -> CONTAINER_CONFIRMED -> SCANNING
          -> DEFINITIVE_MATCH | CANDIDATE_MATCH | GENERIC_FALLBACK | UNKNOWN

1. The byte signature table is consulted first. A hit ends the call with
   that type; no container logic runs.
2. Without ZIP magic the input is not ours: ``UNKNOWN``.
3. Seekable inputs are resolved through the central directory; when none can
   be located, and for streaming inputs, local headers are scanned within the
   mark limit.
4. The best rule match decides. A valid container without any match falls
   back to ``application/zip``.

Malformed containers, I/O errors and rewind failures never escape: they are
logged at DEBUG and turned into ``UNKNOWN``. The handle is rewound before
returning whenever its capability allows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from zipsniff.catalog.catalog import get_signature_catalog
from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.config.model import DetectorConfig
from zipsniff.constants import PREFIX_SIZE
from zipsniff.container.central import SeekableDeepResolver
from zipsniff.container.records import ZIP_MAGICS
from zipsniff.container.scanner import BoundedEntryScanner
from zipsniff.detection.chain import NOT_APPLICABLE
from zipsniff.detection.context import DetectionContext
from zipsniff.detection.state import DetectionResult, DetectionState, Strategy
from zipsniff.errors import MalformedContainerError, MarkLimitExceededError
from zipsniff.io.handles import Capability
from zipsniff.mediatypes import APPLICATION_ZIP, UNKNOWN
from zipsniff.signatures.table import get_byte_signature_table

if TYPE_CHECKING:
    from zipsniff.catalog.catalog import SignatureCatalog
    from zipsniff.detection.chain import Attempt
    from zipsniff.io.handles import InputHandle, SeekableInput
    from zipsniff.signatures.base import ByteSignature
    from zipsniff.signatures.table import ByteSignatureTable

logger: ZipsniffLogger = get_logger(__name__)


class ZipContainerDetector:
    """Classifies ZIP-based inputs into precise media types.

    The detector holds only immutable collaborators; one instance may serve
    any number of concurrent calls, each with its own handle.

    Args:
        config (DetectorConfig | None): Budgets and ceilings (defaults if ``None``).
        catalog (SignatureCatalog | None): Entry rules (built-in catalog if ``None``).
        table (ByteSignatureTable | None): Prefilter (built-in table if ``None``).
    """

    def __init__(
        self,
        config: DetectorConfig | None = None,
        catalog: SignatureCatalog | None = None,
        table: ByteSignatureTable | None = None,
    ) -> None:
        self.config: DetectorConfig = config or DetectorConfig()
        self.catalog: SignatureCatalog = catalog or get_signature_catalog()
        self.table: ByteSignatureTable = table or get_byte_signature_table()

    def detect(self, handle: InputHandle) -> DetectionResult:
        """Classify the input behind ``handle``.

        Args:
            handle (InputHandle): Input positioned at its start.

        Returns:
            DetectionResult: The outcome; never raises for malformed or unreadable input.
        """
        try:
            result: DetectionResult = self._run(handle)
        finally:
            self._rewind(handle)
        logger.debug(
            "Detected %s (%s via %s, %d entries)",
            result.media_type,
            result.state.value,
            result.strategy.value,
            result.entries_inspected,
        )
        return result

    def attempt(self, handle: InputHandle) -> Attempt:
        """Detector chain entry point.

        Returns:
            Attempt: The detected media type, or `NOT_APPLICABLE` when the input is
                not a readable ZIP container (terminal state ``UNKNOWN``).
        """
        result: DetectionResult = self.detect(handle)
        if result.is_unknown:
            return NOT_APPLICABLE
        return result.media_type

    def _run(self, handle: InputHandle) -> DetectionResult:
        state: DetectionState = DetectionState.START
        try:
            prefix: bytes = handle.peek(PREFIX_SIZE)
        except OSError as exc:
            logger.debug("Cannot read input prefix: %s", exc)
            return DetectionResult(UNKNOWN, DetectionState.UNKNOWN)

        signature: ByteSignature | None = self.table.lookup(prefix)
        if signature is not None:
            logger.debug("Prefilter hit: %s (%s)", signature.name, signature.media_type)
            return DetectionResult(
                signature.media_type,
                DetectionState.DEFINITIVE_MATCH,
                rule=signature.name,
            )
        state = self._advance(state, DetectionState.PREFILTER_CHECKED)

        if not prefix.startswith(ZIP_MAGICS):
            logger.trace("No ZIP magic in %r", prefix[:4])
            return DetectionResult(UNKNOWN, DetectionState.UNKNOWN)
        state = self._advance(state, DetectionState.CONTAINER_CONFIRMED)

        context = DetectionContext()
        strategy: Strategy = Strategy.NONE
        state = self._advance(state, DetectionState.SCANNING)
        try:
            strategy = self._enumerate(handle, context)
        except (OSError, MalformedContainerError, MarkLimitExceededError) as exc:
            logger.debug("Container could not be read: %s", exc)
            return DetectionResult(
                UNKNOWN,
                DetectionState.UNKNOWN,
                strategy=strategy,
                entries_inspected=context.entries_seen,
                bytes_consumed=context.bytes_consumed,
            )
        return self._conclude(context, strategy)

    def _advance(self, current: DetectionState, target: DetectionState) -> DetectionState:
        logger.trace("%s -> %s", current.value, target.value)
        return target

    def _enumerate(self, handle: InputHandle, context: DetectionContext) -> Strategy:
        """Fill ``context`` from the container and return the strategy used."""
        if handle.capability is Capability.SEEKABLE:
            seekable: SeekableInput = cast("SeekableInput", handle)
            resolver = SeekableDeepResolver(seekable, self.catalog, self.config)
            if resolver.resolve(context):
                return Strategy.CENTRAL_DIRECTORY
            logger.debug("Falling back to a sequential scan")
            handle.rewind()

        scanner = BoundedEntryScanner(handle, self.catalog, self.config)
        for scanned in scanner.scan(context):
            context.inspect(self.catalog, scanned.descriptor.name, scanned.fragment)
        return Strategy.STREAMING

    def _conclude(self, context: DetectionContext, strategy: Strategy) -> DetectionResult:
        if context.best is None:
            return DetectionResult(
                APPLICATION_ZIP,
                DetectionState.GENERIC_FALLBACK,
                strategy=strategy,
                entries_inspected=context.entries_seen,
                bytes_consumed=context.bytes_consumed,
            )
        state: DetectionState = DetectionState.CANDIDATE_MATCH
        if context.definitive:
            state = DetectionState.DEFINITIVE_MATCH
        return DetectionResult(
            context.best.media_type,
            state,
            strategy=strategy,
            rule=context.best.rule.name,
            entries_inspected=context.entries_seen,
            bytes_consumed=context.bytes_consumed,
        )

    def _rewind(self, handle: InputHandle) -> None:
        try:
            handle.rewind()
        except (OSError, MarkLimitExceededError) as exc:
            logger.debug("Could not rewind input: %s", exc)
