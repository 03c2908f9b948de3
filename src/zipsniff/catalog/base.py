# topmark:header:start
#
#   project      : ZipSniff
#   file         : base.py
#   file_relpath : src/zipsniff/catalog/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Signature rules: what an entry must look like to imply a media type.

A `SignatureRule` is a pure predicate over an entry name and, optionally, a
small decoded fragment of the entry's content. Exactly one *name rule* must be
declared (exact name, prefix, suffix or regular expression); a *content rule*
is optional and narrows the match further.

Content rules exist for formats that share an entry naming convention but
differ in a stored identifier. The ``mimetype`` file of OpenDocument and EPUB
packages is the canonical example: every such package has one, and only its
content tells them apart.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zipsniff.mediatypes import MediaType


class Priority(IntEnum):
    """Rank of a rule match; higher wins across entries.

    Attributes:
        FAMILY: The entry only identifies a format family
            (``[Content_Types].xml``, ``META-INF/MANIFEST.MF``).
        SPECIFIC: The entry name implies a concrete subtype (``ppt/presentation.xml``).
        SPECIFIC_VARIANT: A refinement of a specific subtype (macro-enabled variants).
        DEFINITIVE: A unique marker; scanning stops as soon as one is found.
    """

    FAMILY = 10
    SPECIFIC = 50
    SPECIFIC_VARIANT = 60
    DEFINITIVE = 100


@dataclass(frozen=True)
class SignatureRule:
    """One entry-level signature.

    Attributes:
        name (str): Stable identifier, unique within a catalog.
        media_type (MediaType): Type implied by a match.
        priority (Priority): Rank of a match.
        entry_name (str | None): Exact entry path.
        entry_prefix (str | None): Entry path prefix (``"WEB-INF/"``).
        entry_suffix (str | None): Entry path suffix (``"/vbaProject.bin"``).
        entry_pattern (str | None): Regular expression matched against the whole path
            (see `re.fullmatch`).
        content_equals (bytes | None): Required fragment content; trailing whitespace
            of the fragment is ignored.
        content_contains (bytes | None): Required substring of the fragment.
        parent (MediaType | None): Supertype of ``media_type`` for the default
            specialization registry; ``None`` means the generic ZIP type.
        description (str): Human-readable description.
    """

    name: str
    media_type: MediaType
    priority: Priority
    entry_name: str | None = None
    entry_prefix: str | None = None
    entry_suffix: str | None = None
    entry_pattern: str | None = None
    content_equals: bytes | None = None
    content_contains: bytes | None = None
    parent: MediaType | None = None
    description: str = ""

    # Compiled form of `entry_pattern`
    _regex: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        declared: list[str | None] = [
            self.entry_name,
            self.entry_prefix,
            self.entry_suffix,
            self.entry_pattern,
        ]
        if sum(value is not None for value in declared) != 1:
            raise ValueError(f"Rule {self.name} must declare exactly one name rule")
        if self.content_equals is not None and self.content_contains is not None:
            raise ValueError(f"Rule {self.name} declares two content rules")
        if self.entry_pattern is not None:
            object.__setattr__(self, "_regex", re.compile(self.entry_pattern))

    @property
    def needs_content(self) -> bool:
        """True if the rule inspects entry content."""
        return self.content_equals is not None or self.content_contains is not None

    def matches_name(self, entry_name: str) -> bool:
        """Return True if ``entry_name`` satisfies the rule's name predicate."""
        if self.entry_name is not None:
            return entry_name == self.entry_name
        if self.entry_prefix is not None:
            return entry_name.startswith(self.entry_prefix)
        if self.entry_suffix is not None:
            return entry_name.endswith(self.entry_suffix)
        return self._regex is not None and self._regex.fullmatch(entry_name) is not None

    def matches_content(self, fragment: bytes | None) -> bool:
        """Return True if ``fragment`` satisfies the content predicate.

        A rule without a content predicate accepts any fragment; a rule with one
        never matches a missing fragment.
        """
        if not self.needs_content:
            return True
        if fragment is None:
            return False
        if self.content_equals is not None:
            return fragment.rstrip() == self.content_equals
        return self.content_contains is not None and self.content_contains in fragment

    def matches(self, entry_name: str, fragment: bytes | None = None) -> bool:
        """Return True if the rule matches the entry."""
        return self.matches_name(entry_name) and self.matches_content(fragment)
