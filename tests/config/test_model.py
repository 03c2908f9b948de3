# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_model.py
#   file_relpath : tests/config/test_model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `DetectorConfig` validation and overrides."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from tests.conftest import parametrize
from zipsniff.config.model import DetectorConfig
from zipsniff.constants import DEFAULT_MARK_LIMIT, DEFAULT_MAX_ENTRIES
from zipsniff.errors import ConfigError


def test_defaults() -> None:
    config = DetectorConfig()
    assert config.mark_limit == DEFAULT_MARK_LIMIT
    assert config.max_entries == DEFAULT_MAX_ENTRIES
    assert config.fragment_size > 0
    assert config.max_marker_compressed_size > 0


@parametrize(
    ("field", "value"),
    [
        ("mark_limit", 0),
        ("mark_limit", -1),
        ("max_entries", "10"),
        ("fragment_size", 1.5),
        ("max_marker_compressed_size", True),
    ],
)
def test_invalid_values_are_rejected(field: str, value: Any) -> None:
    with pytest.raises(ConfigError, match=field):
        DetectorConfig(**{field: value})


def test_from_mapping_ignores_unknown_keys(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        config = DetectorConfig.from_mapping({"mark_limit": 1024, "colour": "blue"})
    assert config.mark_limit == 1024
    assert config.max_entries == DEFAULT_MAX_ENTRIES
    assert "colour" in caplog.text


def test_from_mapping_validates() -> None:
    with pytest.raises(ConfigError):
        DetectorConfig.from_mapping({"max_entries": 0})


def test_with_overrides_skips_none() -> None:
    base = DetectorConfig(mark_limit=2048)
    assert base.with_overrides(mark_limit=None, max_entries=None) is base
    updated: DetectorConfig = base.with_overrides(max_entries=7)
    assert updated.mark_limit == 2048
    assert updated.max_entries == 7
    assert base.max_entries == DEFAULT_MAX_ENTRIES


def test_with_overrides_validates() -> None:
    with pytest.raises(ConfigError):
        DetectorConfig().with_overrides(mark_limit=-5)


def test_to_dict_round_trips_through_from_mapping() -> None:
    config = DetectorConfig(mark_limit=4096, max_entries=12)
    assert DetectorConfig.from_mapping(config.to_dict()) == config
