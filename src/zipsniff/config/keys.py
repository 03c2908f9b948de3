# topmark:header:start
#
#   project      : ZipSniff
#   file         : keys.py
#   file_relpath : src/zipsniff/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML key names used by ZipSniff configuration files.

Keys are grouped in the `Toml` namespace so loaders, validators and the
`signatures`/`detect` CLI commands share one spelling.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """Section and key names for ``zipsniff.toml`` / ``[tool.zipsniff]``."""

    SECTION_DETECTION: Final[str] = "detection"

    KEY_MARK_LIMIT: Final[str] = "mark_limit"
    KEY_MAX_ENTRIES: Final[str] = "max_entries"
    KEY_FRAGMENT_SIZE: Final[str] = "fragment_size"
    KEY_MAX_MARKER_COMPRESSED_SIZE: Final[str] = "max_marker_compressed_size"

    ALL_DETECTION_KEYS: Final[tuple[str, ...]] = (
        KEY_MARK_LIMIT,
        KEY_MAX_ENTRIES,
        KEY_FRAGMENT_SIZE,
        KEY_MAX_MARKER_COMPRESSED_SIZE,
    )
