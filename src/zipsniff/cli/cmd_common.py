# topmark:header:start
#
#   project      : ZipSniff
#   file         : cmd_common.py
#   file_relpath : src/zipsniff/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by ZipSniff subcommands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zipsniff.cli.errors import ZipsniffConfigError
from zipsniff.config.io import load_config
from zipsniff.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from zipsniff.cli.console import ClickConsole
    from zipsniff.config.model import DetectorConfig


def get_console(ctx: click.Context) -> ClickConsole:
    """Return the console created by the group callback."""
    ctx.ensure_object(dict)
    return ctx.obj["console"]


def resolve_config(
    config_path: Path | None,
    *,
    mark_limit: int | None = None,
    max_entries: int | None = None,
) -> DetectorConfig:
    """Load the effective config and apply command-line overrides.

    Args:
        config_path (Path | None): Explicit config file, or ``None`` to discover one.
        mark_limit (int | None): ``--mark-limit`` override.
        max_entries (int | None): ``--max-entries`` override.

    Returns:
        DetectorConfig: The validated configuration.

    Raises:
        ZipsniffConfigError: If the file is missing or holds invalid values.
    """
    try:
        config: DetectorConfig = load_config(config_path)
        return config.with_overrides(mark_limit=mark_limit, max_entries=max_entries)
    except ConfigError as exc:
        raise ZipsniffConfigError(str(exc)) from exc
