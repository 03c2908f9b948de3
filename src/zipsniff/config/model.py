# topmark:header:start
#
#   project      : ZipSniff
#   file         : model.py
#   file_relpath : src/zipsniff/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable detection configuration.

`DetectorConfig` carries the resource ceilings the detection engine honours.
It is a frozen dataclass so a single instance can be shared by concurrent
detection calls; use `DetectorConfig.with_overrides` to derive a variant.

Notes:
    * ``mark_limit`` bounds how many bytes a streaming scan may consume (and
      therefore how many bytes a streaming handle must be able to rewind).
      Formats whose identifying entry lies deeper than this silently degrade
      to the generic container type.
    * ``max_entries`` bounds the central-directory walk on seekable inputs.
    * ``fragment_size`` caps the decoded bytes kept for a content rule.
    * ``max_marker_compressed_size`` is the decompression-bomb ceiling: entries
      whose compressed size exceeds it are never decoded.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any

from zipsniff.config.keys import Toml
from zipsniff.config.logging import get_logger
from zipsniff.constants import (
    DEFAULT_FRAGMENT_SIZE,
    DEFAULT_MARK_LIMIT,
    DEFAULT_MAX_ENTRIES,
    DEFAULT_MAX_MARKER_COMPRESSED_SIZE,
)
from zipsniff.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from zipsniff.config.logging import ZipsniffLogger

logger: ZipsniffLogger = get_logger(__name__)


@dataclass(frozen=True)
class DetectorConfig:
    """Resource ceilings for a detection call.

    Attributes:
        mark_limit (int): Maximum bytes a streaming scan may consume.
        max_entries (int): Maximum central-directory entries inspected on seekable inputs.
        fragment_size (int): Maximum decoded bytes retained per content-bearing entry.
        max_marker_compressed_size (int): Entries with a larger compressed size are not
            decoded.
    """

    mark_limit: int = DEFAULT_MARK_LIMIT
    max_entries: int = DEFAULT_MAX_ENTRIES
    fragment_size: int = DEFAULT_FRAGMENT_SIZE
    max_marker_compressed_size: int = DEFAULT_MAX_MARKER_COMPRESSED_SIZE

    def __post_init__(self) -> None:
        for f in fields(self):
            value: Any = getattr(self, f.name)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            if value <= 0:
                raise ConfigError(f"{f.name} must be positive, got {value}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DetectorConfig:
        """Build a config from a ``[detection]`` TOML table.

        Unknown keys are ignored with a warning; missing keys keep their defaults.

        Args:
            data (Mapping[str, Any]): Parsed TOML table.

        Returns:
            DetectorConfig: The validated configuration.

        Raises:
            ConfigError: If a value has the wrong type or is not positive.
        """
        known: dict[str, Any] = {}
        for key, value in data.items():
            if key in Toml.ALL_DETECTION_KEYS:
                known[key] = value
            else:
                logger.warning("Ignoring unknown detection setting: %s", key)
        return cls(**known)

    def with_overrides(self, **overrides: int | None) -> DetectorConfig:
        """Return a copy with the non-``None`` overrides applied.

        Args:
            **overrides (int | None): Field values; ``None`` means "keep current".

        Returns:
            DetectorConfig: A new validated configuration.
        """
        applied: dict[str, int] = {k: v for k, v in overrides.items() if v is not None}
        if not applied:
            return self
        return replace(self, **applied)

    def to_dict(self) -> dict[str, int]:
        """Return the configuration as a plain ``[detection]`` table."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
