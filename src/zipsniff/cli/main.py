# topmark:header:start
#
#   project      : ZipSniff
#   file         : main.py
#   file_relpath : src/zipsniff/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff command-line entry point.

Group-level options (verbosity and color) are resolved once and placed into
``ctx.obj`` together with the console; subcommands read them from there.
"""

from __future__ import annotations

import click

from zipsniff.cli.commands.detect import detect_command
from zipsniff.cli.commands.dump_config import dump_config_command
from zipsniff.cli.commands.signatures import signatures_command
from zipsniff.cli.commands.version import version_command
from zipsniff.cli.console import ClickConsole
from zipsniff.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from zipsniff.config.logging import ZipsniffLogger, get_logger, resolve_env_log_level, setup_logging

logger: ZipsniffLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    ``ZIPSNIFF_LOG_LEVEL`` takes precedence over ``-v``/``-q`` for internal logging.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.ensure_object(dict)

    level_cli: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = level_cli

    level_env: int | None = resolve_env_log_level()
    log_level: int = level_env if level_env is not None else level_cli
    ctx.obj["log_level"] = log_level
    setup_logging(level=log_level)

    effective_mode: ColorMode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color: bool = resolve_color_mode(cli_mode=effective_mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Identify ZIP-based file formats (OOXML, ODF, EPUB, JAR, APK, iWork, ...).",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the ZipSniff CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    if ctx.invoked_subcommand is None:
        console: ClickConsole = ctx.obj["console"]
        console.print("Hint: use 'zipsniff detect PATH...' to identify files.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(detect_command)

cli.add_command(signatures_command)

cli.add_command(dump_config_command)

cli.add_command(version_command)

if __name__ == "__main__":
    cli()
