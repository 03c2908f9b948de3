# topmark:header:start
#
#   project      : ZipSniff
#   file         : version.py
#   file_relpath : src/zipsniff/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff `version` command.

Prints the ZipSniff version as installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zipsniff.cli.cmd_common import get_console
from zipsniff.cli.options import OutputFormat, output_format_option
from zipsniff.constants import ZIPSNIFF_VERSION

if TYPE_CHECKING:
    from zipsniff.cli.console import ClickConsole


@click.command(
    name="version",
    help="Show the current version of ZipSniff.",
)
@output_format_option
@click.pass_context
def version_command(ctx: click.Context, *, output_format: OutputFormat | None = None) -> None:
    """Show the current version of ZipSniff."""
    console: ClickConsole = get_console(ctx)
    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if fmt.is_machine:
        import json

        console.print(json.dumps({"version": ZIPSNIFF_VERSION}))
    else:
        console.print(console.styled(ZIPSNIFF_VERSION, bold=True))
