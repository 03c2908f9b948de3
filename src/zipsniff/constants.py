# topmark:header:start
#
#   project      : ZipSniff
#   file         : constants.py
#   file_relpath : src/zipsniff/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Final

try:
    ZIPSNIFF_VERSION: str = get_version("zipsniff")
except PackageNotFoundError:  # running from a source checkout
    ZIPSNIFF_VERSION = "0.0.0"

# Configuration file names, looked up from the working directory upwards.
CONFIG_FILE_NAME: Final[str] = "zipsniff.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
PYPROJECT_SECTION: Final[str] = "tool.zipsniff"

# Environment variable consulted by `zipsniff.config.logging`.
LOG_LEVEL_ENV: Final[str] = "ZIPSNIFF_LOG_LEVEL"

# Detection defaults.
DEFAULT_MARK_LIMIT: Final[int] = 16 * 1024 * 1024
DEFAULT_MAX_ENTRIES: Final[int] = 10_000
DEFAULT_FRAGMENT_SIZE: Final[int] = 64 * 1024
DEFAULT_MAX_MARKER_COMPRESSED_SIZE: Final[int] = 4 * 1024 * 1024

# Number of leading bytes handed to the byte signature table.
PREFIX_SIZE: Final[int] = 16

# Read granularity when walking entry data in streaming mode.
CHUNK_SIZE: Final[int] = 64 * 1024

# Largest decoded:compressed ratio tolerated while inflating a deflate stream
# of unknown length.
MAX_INFLATE_RATIO: Final[int] = 100
