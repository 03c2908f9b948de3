# topmark:header:start
#
#   project      : ZipSniff
#   file         : io.py
#   file_relpath : src/zipsniff/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load ZipSniff configuration from TOML sources.

Two on-disk sources are recognised:

- ``zipsniff.toml`` with a top-level ``[detection]`` table, and
- ``pyproject.toml`` with a ``[tool.zipsniff.detection]`` table.

Parsing is done with `tomlkit` and returned as plain `dict` structures. The
detection engine itself never reads files; callers resolve a
`zipsniff.config.model.DetectorConfig` here and pass it in.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from zipsniff.config.keys import Toml
from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.config.model import DetectorConfig
from zipsniff.constants import CONFIG_FILE_NAME, PYPROJECT_FILE_NAME, PYPROJECT_SECTION
from zipsniff.errors import ConfigError

TomlTable = dict[str, Any]

logger: ZipsniffLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document.

    Returns:
        TomlTable: The parsed TOML content.

    Notes:
        - Errors are logged and an empty dict is returned on failure.
        - Encoding is assumed to be UTF-8.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
        return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}


def _get_section(table: TomlTable, dotted: str) -> TomlTable:
    """Walk a dotted section path; missing or non-table parts yield ``{}``."""
    current: Any = table
    for part in dotted.split("."):
        if not isinstance(current, dict):
            return {}
        current = cast("TomlTable", current).get(part, {})
    return cast("TomlTable", current) if isinstance(current, dict) else {}


def extract_detection_table(path: Path, data: TomlTable) -> TomlTable:
    """Return the ``detection`` table for a parsed config source.

    Args:
        path (Path): Source path; ``pyproject.toml`` selects the ``tool.zipsniff`` section.
        data (TomlTable): Parsed TOML document.

    Returns:
        TomlTable: The detection table (possibly empty).
    """
    root: TomlTable = data
    if path.name == PYPROJECT_FILE_NAME:
        root = _get_section(data, PYPROJECT_SECTION)
    return _get_section(root, Toml.SECTION_DETECTION)


def discover_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest config file from ``start`` upwards.

    A ``zipsniff.toml`` wins over a ``pyproject.toml`` in the same directory;
    a ``pyproject.toml`` only counts when it has a ``[tool.zipsniff]`` section.

    Args:
        start (Path | None): Directory to start from (defaults to the working directory).

    Returns:
        Path | None: The config file, or ``None`` if none was found.
    """
    base: Path = (start or Path.cwd()).resolve()
    for directory in (base, *base.parents):
        candidate: Path = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        pyproject: Path = directory / PYPROJECT_FILE_NAME
        if pyproject.is_file() and _get_section(load_toml_dict(pyproject), PYPROJECT_SECTION):
            return pyproject
    return None


def load_config(path: Path | None = None, *, start: Path | None = None) -> DetectorConfig:
    """Resolve a `DetectorConfig` from an explicit file or by discovery.

    Args:
        path (Path | None): Explicit config file. Must exist when given.
        start (Path | None): Discovery start directory when ``path`` is ``None``.

    Returns:
        DetectorConfig: Defaults overlaid with the file's ``detection`` table.

    Raises:
        ConfigError: If an explicit path does not exist or a value is invalid.
    """
    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    source: Path | None = path or discover_config_file(start)
    if source is None:
        logger.debug("No config file found; using defaults")
        return DetectorConfig()

    logger.debug("Loading detection config from %s", source)
    table: TomlTable = extract_detection_table(source, load_toml_dict(source))
    return DetectorConfig.from_mapping(table)


def render_config_toml(config: DetectorConfig) -> str:
    """Render a config as a ``zipsniff.toml`` document."""
    doc: tomlkit.TOMLDocument = tomlkit.document()
    section = tomlkit.table()
    for key, value in config.to_dict().items():
        section.add(key, value)
    doc.add(Toml.SECTION_DETECTION, section)
    return tomlkit.dumps(doc)
