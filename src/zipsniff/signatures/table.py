# topmark:header:start
#
#   project      : ZipSniff
#   file         : table.py
#   file_relpath : src/zipsniff/signatures/table.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Byte signature table used as the detection prefilter.

The table is built once (lazily, cached) from
`zipsniff.signatures.builtins.BYTE_SIGNATURES` and is read-only afterwards,
so concurrent detection calls may share it without locking.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.constants import PREFIX_SIZE
from zipsniff.container.records import ZIP_MAGICS
from zipsniff.signatures.builtins import BYTE_SIGNATURES

if TYPE_CHECKING:
    from collections.abc import Iterable

    from zipsniff.mediatypes import MediaType
    from zipsniff.signatures.base import ByteSignature

logger: ZipsniffLogger = get_logger(__name__)


class ByteSignatureTable:
    """Ordered, immutable set of leading-byte signatures.

    Args:
        signatures (Iterable[ByteSignature]): Signatures in match order.

    Raises:
        ValueError: If a signature is wider than `PREFIX_SIZE`, would match ZIP
            magic, or two signatures share a name.
    """

    def __init__(self, signatures: Iterable[ByteSignature]) -> None:
        ordered: tuple[ByteSignature, ...] = tuple(signatures)
        seen: set[str] = set()
        for sig in ordered:
            if sig.name in seen:
                raise ValueError(f"Duplicate byte signature name: {sig.name}")
            seen.add(sig.name)
            if sig.span > PREFIX_SIZE:
                raise ValueError(
                    f"Signature {sig.name} needs {sig.span} bytes; the prefix is {PREFIX_SIZE}"
                )
            if any(sig.matches(magic.ljust(PREFIX_SIZE, b"\x00")) for magic in ZIP_MAGICS):
                raise ValueError(f"Signature {sig.name} would shadow ZIP magic")
        self._signatures: tuple[ByteSignature, ...] = ordered

    @property
    def signatures(self) -> tuple[ByteSignature, ...]:
        """The signatures in match order."""
        return self._signatures

    def lookup(self, prefix: bytes) -> ByteSignature | None:
        """Return the first signature matching ``prefix``, if any."""
        head: bytes = prefix[:PREFIX_SIZE]
        for sig in self._signatures:
            if sig.matches(head):
                return sig
        return None

    def match(self, prefix: bytes) -> MediaType | None:
        """Classify a leading byte prefix.

        Args:
            prefix (bytes): The first bytes of the input (only `PREFIX_SIZE` are used).

        Returns:
            MediaType | None: The confirmed non-container type, or ``None`` if no
                signature matched (including when the input is too short).
        """
        sig: ByteSignature | None = self.lookup(prefix)
        if sig is None:
            return None
        logger.debug("Prefilter matched byte signature %s (%s)", sig.name, sig.media_type)
        return sig.media_type

    def __len__(self) -> int:
        return len(self._signatures)


@lru_cache(maxsize=1)
def get_byte_signature_table() -> ByteSignatureTable:
    """Return (and cache) the built-in byte signature table."""
    table = ByteSignatureTable(BYTE_SIGNATURES)
    logger.debug("Loaded %d byte signatures", len(table))
    return table
