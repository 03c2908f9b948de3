# topmark:header:start
#
#   project      : ZipSniff
#   file         : test_errors.py
#   file_relpath : tests/test_errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for engine exception messages."""

from __future__ import annotations

from zipsniff.errors import (
    ConfigError,
    MalformedContainerError,
    MarkLimitExceededError,
    UnsupportedCompressionError,
    ZipsniffError,
)


def test_malformed_container_error_reports_offset() -> None:
    assert str(MalformedContainerError("Truncated header")) == "Truncated header"
    err = MalformedContainerError("Truncated header", offset=120)
    assert err.offset == 120
    assert str(err) == "Truncated header (at offset 120)"


def test_mark_limit_exceeded_error_fields() -> None:
    err = MarkLimitExceededError(2048, 1024)
    assert (err.consumed, err.mark_limit) == (2048, 1024)
    assert "1024" in str(err)


def test_all_errors_share_a_base() -> None:
    for exc in (
        MalformedContainerError("x"),
        MarkLimitExceededError(2, 1),
        UnsupportedCompressionError(99),
        ConfigError("x"),
    ):
        assert isinstance(exc, ZipsniffError)
    assert UnsupportedCompressionError(99).method == 99
