# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration and logging for ZipSniff.

This package exposes the immutable `DetectorConfig`, the TOML loaders that
resolve it from ``zipsniff.toml`` / ``pyproject.toml``, and the logging setup
shared by the library and the CLI.
"""

from __future__ import annotations

from zipsniff.config.io import discover_config_file, load_config, render_config_toml
from zipsniff.config.model import DetectorConfig

__all__ = [
    "DetectorConfig",
    "discover_config_file",
    "load_config",
    "render_config_toml",
]
