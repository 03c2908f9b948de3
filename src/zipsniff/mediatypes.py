# topmark:header:start
#
#   project      : ZipSniff
#   file         : mediatypes.py
#   file_relpath : src/zipsniff/mediatypes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Media type values and the specialization relation.

`MediaType` is an opaque, hashable ``type/subtype`` value. Detection results
are always one of these; `UNKNOWN` (``application/octet-stream``) is the
explicit "cannot classify" sentinel.

The *is-a-specialization-of* relation between media types belongs to an
external registry. `SpecializationRegistry` is the protocol the engine and
its callers consume; `MediaTypeRegistry` is a small default implementation
backed by a child-to-parent table covering the types this package detects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

_TOKEN_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9][A-Za-z0-9!#$&^_.+\-]*$")


@dataclass(frozen=True, order=True)
class MediaType:
    """An internet media type without parameters.

    Attributes:
        type (str): Top-level type (``application``, ``image``...), lower case.
        subtype (str): Subtype, lower case.
    """

    type: str
    subtype: str

    def __post_init__(self) -> None:
        for part in (self.type, self.subtype):
            if not _TOKEN_RE.match(part):
                raise ValueError(f"Invalid media type token: {part!r}")
        # Media types compare case-insensitively; normalise once.
        object.__setattr__(self, "type", self.type.lower())
        object.__setattr__(self, "subtype", self.subtype.lower())

    @classmethod
    def parse(cls, text: str) -> MediaType:
        """Parse ``type/subtype`` text, ignoring any ``;parameters``.

        Args:
            text (str): Media type string, e.g. ``"application/zip"``.

        Returns:
            MediaType: The parsed value.

        Raises:
            ValueError: If ``text`` is not a valid media type.
        """
        base: str = text.split(";", 1)[0].strip()
        type_, sep, subtype = base.partition("/")
        if not sep:
            raise ValueError(f"Not a media type: {text!r}")
        return cls(type_.strip(), subtype.strip())

    @classmethod
    def application(cls, subtype: str) -> MediaType:
        """Shorthand for ``application/<subtype>``."""
        return cls("application", subtype)

    @classmethod
    def image(cls, subtype: str) -> MediaType:
        """Shorthand for ``image/<subtype>``."""
        return cls("image", subtype)

    def __str__(self) -> str:
        return f"{self.type}/{self.subtype}"


OCTET_STREAM: Final[MediaType] = MediaType.application("octet-stream")
UNKNOWN: Final[MediaType] = OCTET_STREAM
APPLICATION_ZIP: Final[MediaType] = MediaType.application("zip")


@runtime_checkable
class SpecializationRegistry(Protocol):
    """Answers *is-a-specialization-of* queries between media types."""

    def is_specialization_of(self, candidate: MediaType, reference: MediaType) -> bool:
        """Return True if ``candidate`` is a strict descendant of ``reference``.

        Args:
            candidate (MediaType): The more specific type.
            reference (MediaType): The type it may specialize.

        Returns:
            bool: True for a strict specialization, False otherwise.
        """
        ...


class MediaTypeRegistry:
    """Default `SpecializationRegistry` backed by a child-to-parent table.

    The table is copied at construction and never mutated afterwards, so one
    registry can be shared by concurrent callers.

    Args:
        supertypes (Mapping[MediaType, MediaType]): Direct parent of each known type.
    """

    def __init__(self, supertypes: Mapping[MediaType, MediaType]) -> None:
        self._supertypes: dict[MediaType, MediaType] = dict(supertypes)

    def supertype(self, media_type: MediaType) -> MediaType | None:
        """Return the direct parent of ``media_type``, if known."""
        return self._supertypes.get(media_type)

    def ancestors(self, media_type: MediaType) -> Iterator[MediaType]:
        """Yield parents from nearest to farthest; cycles are cut."""
        seen: set[MediaType] = {media_type}
        parent: MediaType | None = self._supertypes.get(media_type)
        while parent is not None and parent not in seen:
            yield parent
            seen.add(parent)
            parent = self._supertypes.get(parent)

    def is_specialization_of(self, candidate: MediaType, reference: MediaType) -> bool:
        """Return True if ``reference`` is an ancestor of ``candidate``."""
        return any(parent == reference for parent in self.ancestors(candidate))

    def __contains__(self, media_type: object) -> bool:
        return media_type in self._supertypes


@lru_cache(maxsize=1)
def get_default_registry() -> MediaTypeRegistry:
    """Return (and cache) the registry of built-in ZIP-based types.

    Every media type produced by the built-in catalog is registered as a
    descendant of ``application/zip``.
    """
    # Local import: the catalog imports this module for MediaType.
    from zipsniff.catalog.catalog import get_signature_catalog

    table: dict[MediaType, MediaType] = {}
    for rule in get_signature_catalog().rules:
        if rule.media_type == APPLICATION_ZIP:
            continue
        parent: MediaType = rule.parent or APPLICATION_ZIP
        table.setdefault(rule.media_type, parent)
        if parent != APPLICATION_ZIP:
            table.setdefault(parent, APPLICATION_ZIP)
    return MediaTypeRegistry(table)
