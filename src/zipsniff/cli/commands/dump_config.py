# topmark:header:start
#
#   project      : ZipSniff
#   file         : dump_config.py
#   file_relpath : src/zipsniff/cli/commands/dump_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff `dump-config` command.

Prints the effective detection settings (defaults, overlaid with the
discovered or given config file and any command-line overrides) as a
``zipsniff.toml`` document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zipsniff.cli.cmd_common import get_console, resolve_config
from zipsniff.cli.options import config_file_option
from zipsniff.config.io import render_config_toml

if TYPE_CHECKING:
    from pathlib import Path

    from zipsniff.cli.console import ClickConsole
    from zipsniff.config.model import DetectorConfig


@click.command(
    name="dump-config",
    help="Print the effective detection settings as TOML.",
)
@click.option(
    "--mark-limit",
    type=click.IntRange(min=1),
    default=None,
    help="Override mark_limit.",
)
@click.option(
    "--max-entries",
    type=click.IntRange(min=1),
    default=None,
    help="Override max_entries.",
)
@config_file_option
@click.pass_context
def dump_config_command(
    ctx: click.Context,
    *,
    mark_limit: int | None,
    max_entries: int | None,
    config_path: Path | None,
) -> None:
    """Print the effective detection settings as TOML."""
    console: ClickConsole = get_console(ctx)
    config: DetectorConfig = resolve_config(
        config_path, mark_limit=mark_limit, max_entries=max_entries
    )
    console.print(render_config_toml(config), nl=False)
