# topmark:header:start
#
#   project      : ZipSniff
#   file         : api.py
#   file_relpath : src/zipsniff/api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public ZipSniff API (stable surface).

This module exposes a **small, typed API** for callers that want to classify
inputs without going through the CLI. Internal modules remain private.

```python
from zipsniff import api

result = api.sniff("report.docx")
print(result.media_type, result.state)

api.detect(b"PK\\x03\\x04...", config={"mark_limit": 65536}, streaming=True)
```

Notes:
    * ``source`` may be bytes, a filesystem path, a binary file object or an
      existing `zipsniff.io.handles.InputHandle`. Handles created here are
      closed before returning; caller-provided streams and handles are not.
    * ``config`` accepts a `DetectorConfig` or a plain mapping mirroring the
      ``[detection]`` TOML table.
    * Detection never raises for malformed input; unreadable containers are
      reported as ``application/octet-stream``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Union

from zipsniff.config.model import DetectorConfig
from zipsniff.detection.orchestrator import ZipContainerDetector
from zipsniff.io.handles import BoundedPrefixBuffer, SeekableInput, open_input
from zipsniff.mediatypes import APPLICATION_ZIP, MediaType, get_default_registry

if TYPE_CHECKING:
    from zipsniff.detection.state import DetectionResult
    from zipsniff.io.handles import InputSource
    from zipsniff.mediatypes import SpecializationRegistry

ConfigInput = Union[DetectorConfig, Mapping[str, Any], None]

__all__ = [
    "detect",
    "is_zip_based",
    "sniff",
]


def _resolve_config(config: ConfigInput) -> DetectorConfig:
    if config is None:
        return DetectorConfig()
    if isinstance(config, DetectorConfig):
        return config
    return DetectorConfig.from_mapping(config)


def sniff(
    source: InputSource,
    *,
    config: ConfigInput = None,
    streaming: bool = False,
) -> DetectionResult:
    """Classify ``source`` and return the full detection result.

    Args:
        source (InputSource): Bytes, path, binary stream or input handle.
        config (ConfigInput): Detection settings (defaults if ``None``).
        streaming (bool): Force the sequential strategy even for seekable sources.

    Returns:
        DetectionResult: Media type, terminal state and scan statistics.

    Raises:
        ConfigError: If ``config`` is a mapping with invalid values.
        OSError: If ``source`` is a path that cannot be opened.
        TypeError: If ``source`` is not a supported input.
    """
    resolved: DetectorConfig = _resolve_config(config)
    caller_owned: bool = isinstance(source, (BoundedPrefixBuffer, SeekableInput))
    handle: BoundedPrefixBuffer | SeekableInput = open_input(
        source, mark_limit=resolved.mark_limit, streaming=streaming
    )
    try:
        return ZipContainerDetector(resolved).detect(handle)
    finally:
        if not caller_owned:
            handle.close()


def detect(
    source: InputSource,
    *,
    config: ConfigInput = None,
    streaming: bool = False,
) -> MediaType:
    """Classify ``source`` and return only its media type.

    See `sniff` for the arguments.
    """
    return sniff(source, config=config, streaming=streaming).media_type


def is_zip_based(
    media_type: MediaType | str,
    registry: SpecializationRegistry | None = None,
) -> bool:
    """Return True if ``media_type`` is ``application/zip`` or one of its specializations.

    Args:
        media_type (MediaType | str): Type to test.
        registry (SpecializationRegistry | None): Specialization registry; the
            built-in one when ``None``.
    """
    mt: MediaType = MediaType.parse(media_type) if isinstance(media_type, str) else media_type
    if mt == APPLICATION_ZIP:
        return True
    reg: SpecializationRegistry = registry or get_default_registry()
    return reg.is_specialization_of(mt, APPLICATION_ZIP)
