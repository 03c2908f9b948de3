# topmark:header:start
#
#   project      : ZipSniff
#   file         : catalog.py
#   file_relpath : src/zipsniff/catalog/catalog.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Signature catalog: ordered rule table and entry classification.

Builds the runtime catalog of `zipsniff.catalog.base.SignatureRule` objects
from the built-in rule groups and optionally from plugin entry points. The
default catalog is constructed lazily on first access and cached thereafter.

Resolution:
    Rules are kept sorted by ``(-priority, declaration index)``. `classify`
    returns the first matching rule in that order, so among rules of equal
    priority the one declared first wins. Across entries, the caller keeps
    the best `Classification` seen (see
    `zipsniff.detection.context.DetectionContext.offer`).

Notes:
    * Built-ins are imported lazily from topical modules, each exporting a
      ``RULES`` list. Module order is declaration order.
    * Plugins are discovered via the ``zipsniff.rules`` entry point group and
      are declared after all built-ins.
    * A catalog never changes after construction and is safe to share between
      concurrent detection calls.
"""

from __future__ import annotations

from collections.abc import Iterable as IterABC
from functools import lru_cache
from importlib import import_module
from importlib.metadata import EntryPoints, entry_points
from typing import TYPE_CHECKING, Any, Final, NamedTuple, cast

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.config.logging import ZipsniffLogger, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from types import ModuleType

    from zipsniff.mediatypes import MediaType

logger: ZipsniffLogger = get_logger(__name__)

_BUILTIN_MODULES: Final[tuple[str, ...]] = (
    "zipsniff.catalog.builtins.odf",
    "zipsniff.catalog.builtins.ooxml",
    "zipsniff.catalog.builtins.iwork",
    "zipsniff.catalog.builtins.java",
    "zipsniff.catalog.builtins.misc",
)

ENTRYPOINT_GROUP: Final[str] = "zipsniff.rules"


class Classification(NamedTuple):
    """A rule match for one entry.

    Attributes:
        rule (SignatureRule): The matching rule.
        media_type (MediaType): Type implied by the rule.
        priority (Priority): Rank of the match.
        index (int): Declaration index of the rule (lower wins ties).
    """

    rule: SignatureRule
    media_type: MediaType
    priority: Priority
    index: int


class SignatureCatalog:
    """Immutable, priority-ordered rule table.

    Args:
        rules (Iterable[SignatureRule]): Rules in declaration order.

    Raises:
        ValueError: If two rules share a name.
    """

    def __init__(self, rules: Iterable[SignatureRule]) -> None:
        declared: tuple[SignatureRule, ...] = tuple(rules)
        seen: set[str] = set()
        for rule in declared:
            if rule.name in seen:
                raise ValueError(f"Duplicate signature rule name: {rule.name}")
            seen.add(rule.name)
        self._rules: tuple[SignatureRule, ...] = declared
        self._ordered: tuple[tuple[int, SignatureRule], ...] = tuple(
            sorted(enumerate(declared), key=lambda item: (-item[1].priority, item[0]))
        )
        self._content_rules: tuple[SignatureRule, ...] = tuple(
            rule for rule in declared if rule.needs_content
        )

    @property
    def rules(self) -> tuple[SignatureRule, ...]:
        """Rules in declaration order."""
        return self._rules

    def ordered(self) -> tuple[tuple[int, SignatureRule], ...]:
        """Return ``(declaration index, rule)`` pairs in evaluation order."""
        return self._ordered

    def wants_content(self, entry_name: str) -> bool:
        """Return True if some content rule could match ``entry_name``.

        The scanner uses this to decide whether an entry's payload is worth
        decoding at all.
        """
        return any(rule.matches_name(entry_name) for rule in self._content_rules)

    def classify(self, entry_name: str, fragment: bytes | None = None) -> Classification | None:
        """Classify one entry.

        Args:
            entry_name (str): Entry path as stored in the container.
            fragment (bytes | None): Leading decoded bytes of the entry, if available.

        Returns:
            Classification | None: The highest-priority matching rule (earliest declared
                on ties), or ``None`` if no rule matches.
        """
        for index, rule in self._ordered:
            if rule.matches(entry_name, fragment):
                return Classification(rule, rule.media_type, rule.priority, index)
        return None

    def get(self, name: str) -> SignatureRule | None:
        """Return the rule called ``name``, if any."""
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    def __len__(self) -> int:
        return len(self._rules)


def _iter_builtin_rules() -> Iterable[SignatureRule]:
    """Yield built-in rules from topical modules (lazy import)."""
    for modname in _BUILTIN_MODULES:
        mod: ModuleType = import_module(modname)
        rules: Any = getattr(mod, "RULES", None)
        if not isinstance(rules, list):
            logger.warning("Module %s has no RULES list; skipping", modname)
            continue
        for obj in cast("Sequence[object]", rules):
            if isinstance(obj, SignatureRule):
                yield obj
            else:
                logger.warning("Non-SignatureRule entry in %s.RULES: %r", modname, obj)


def _iter_plugin_rules() -> Iterable[SignatureRule]:
    """Yield rules provided by external plugins (entry points)."""
    try:
        eps = entry_points()
    except Exception:
        logger.exception("Failed to read entry points")
        return

    candidates: EntryPoints = eps.select(group=ENTRYPOINT_GROUP)
    for ep in candidates:
        try:
            provider: Any = ep.load()
            provided: Any = provider() if callable(provider) else provider
            if not isinstance(provided, IterABC):
                logger.warning(
                    "Entry point %s did not return an iterable of SignatureRule objects: %r",
                    ep.name,
                    provided,
                )
                continue
            for obj in cast("IterABC[object]", provided):
                if isinstance(obj, SignatureRule):
                    yield obj
                else:
                    logger.warning("Entry point %s provided non-SignatureRule: %r", ep.name, obj)
        except Exception:
            logger.exception("Failed loading signature rules from entry point %s", ep.name)


def _dedupe_by_name(items: Iterable[SignatureRule]) -> list[SignatureRule]:
    """Deduplicate by rule name, preserving first occurrence order."""
    seen: set[str] = set()
    acc: list[SignatureRule] = []
    for rule in items:
        if rule.name in seen:
            logger.warning("Duplicate signature rule name detected: %s (keeping first)", rule.name)
            continue
        seen.add(rule.name)
        acc.append(rule)
    return acc


@lru_cache(maxsize=1)
def get_signature_catalog() -> SignatureCatalog:
    """Return (and cache) the default catalog: built-ins plus plugin rules."""
    ordered: list[SignatureRule] = list(_iter_builtin_rules())
    ordered.extend(_iter_plugin_rules())
    catalog = SignatureCatalog(_dedupe_by_name(ordered))
    logger.debug(
        "Loaded %d signature rules (%d definitive)",
        len(catalog),
        sum(1 for rule in catalog.rules if rule.priority == Priority.DEFINITIVE),
    )
    return catalog
