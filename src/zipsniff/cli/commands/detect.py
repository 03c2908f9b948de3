# topmark:header:start
#
#   project      : ZipSniff
#   file         : detect.py
#   file_relpath : src/zipsniff/cli/commands/detect.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff `detect` command.

Classifies each PATH and prints its media type. ``-`` reads standard input,
which is always handled as a non-seekable stream bounded by the mark limit.

Examples:
    zipsniff detect report.docx slides.odp
    cat bundle.apk | zipsniff detect --format json -
    zipsniff detect --fail-on-unknown --mark-limit 65536 upload.bin
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from zipsniff.api import sniff
from zipsniff.cli.cmd_common import get_console, resolve_config
from zipsniff.cli.errors import (
    ZipsniffCliError,
    ZipsniffFileNotFoundError,
    ZipsniffUsageError,
)
from zipsniff.cli.exit_codes import ExitCode
from zipsniff.cli.options import OutputFormat, config_file_option, output_format_option
from zipsniff.config.logging import ZipsniffLogger, get_logger
from zipsniff.detection.state import DetectionState

if TYPE_CHECKING:
    from zipsniff.cli.console import ClickConsole
    from zipsniff.config.model import DetectorConfig
    from zipsniff.detection.state import DetectionResult

logger: ZipsniffLogger = get_logger(__name__)

STDIN_MARKER = "-"

_STATE_COLORS: dict[DetectionState, str] = {
    DetectionState.DEFINITIVE_MATCH: "green",
    DetectionState.CANDIDATE_MATCH: "cyan",
    DetectionState.GENERIC_FALLBACK: "yellow",
    DetectionState.UNKNOWN: "red",
}


def _sniff_one(path: str, config: DetectorConfig, *, streaming: bool) -> DetectionResult:
    if path == STDIN_MARKER:
        stdin = click.get_binary_stream("stdin")
        return sniff(stdin, config=config, streaming=True)
    target = Path(path)
    if not target.exists():
        raise ZipsniffFileNotFoundError(f"No such file: {path}")
    if target.is_dir():
        raise ZipsniffCliError(f"Is a directory: {path}")
    try:
        return sniff(target, config=config, streaming=streaming)
    except OSError as exc:
        raise ZipsniffCliError(f"Cannot read {path}: {exc.strerror or exc}") from exc


def _render_text(console: ClickConsole, path: str, result: DetectionResult, detail: bool) -> None:
    label: str = "<stdin>" if path == STDIN_MARKER else path
    media: str = console.styled(str(result.media_type), fg=_STATE_COLORS[result.state])
    if not detail:
        console.print(f"{label}: {media}")
        return
    extra: str = result.state.value
    if result.rule:
        extra += f", rule {result.rule}"
    extra += f", {result.entries_inspected} entries via {result.strategy.value}"
    console.print(f"{label}: {media} ({console.styled(extra, dim=True)})")


@click.command(
    name="detect",
    help="Identify the media type of each PATH ('-' reads standard input).",
)
@click.argument("paths", nargs=-1, required=True, metavar="PATH...")
@click.option(
    "--stream",
    "streaming",
    is_flag=True,
    help="Scan local headers sequentially instead of reading the central directory.",
)
@click.option(
    "--mark-limit",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum bytes a streaming scan may consume.",
)
@click.option(
    "--max-entries",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum container entries to inspect.",
)
@click.option(
    "--fail-on-unknown",
    is_flag=True,
    help=f"Exit with {int(ExitCode.UNKNOWN_TYPE)} if any input is unrecognized.",
)
@config_file_option
@output_format_option
@click.pass_context
def detect_command(
    ctx: click.Context,
    *,
    paths: tuple[str, ...],
    streaming: bool,
    mark_limit: int | None,
    max_entries: int | None,
    fail_on_unknown: bool,
    config_path: Path | None,
    output_format: OutputFormat | None,
) -> None:
    """Identify the media type of each PATH.

    Args:
        ctx (click.Context): Click context carrying the console.
        paths (tuple[str, ...]): Inputs; ``-`` for standard input.
        streaming (bool): Force the sequential strategy.
        mark_limit (int | None): Override for ``mark_limit``.
        max_entries (int | None): Override for ``max_entries``.
        fail_on_unknown (bool): Exit with `ExitCode.UNKNOWN_TYPE` on unknown inputs.
        config_path (Path | None): Explicit config file.
        output_format (OutputFormat | None): Output format.
    """
    console: ClickConsole = get_console(ctx)
    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if paths.count(STDIN_MARKER) > 1:
        raise ZipsniffUsageError("'-' may only be given once")

    config: DetectorConfig = resolve_config(
        config_path, mark_limit=mark_limit, max_entries=max_entries
    )
    logger.debug("Effective detection config: %s", config)
    detail: bool = ctx.obj.get("verbosity_level", logging.WARNING) <= logging.INFO

    records: list[dict[str, Any]] = []
    any_unknown = False
    for path in paths:
        result: DetectionResult = _sniff_one(path, config, streaming=streaming)
        any_unknown = any_unknown or result.is_unknown
        if fmt is OutputFormat.DEFAULT:
            _render_text(console, path, result, detail)
            continue
        record: dict[str, Any] = {"path": path, **result.to_dict()}
        if fmt is OutputFormat.NDJSON:
            import json

            console.print(json.dumps(record))
        else:
            records.append(record)

    if fmt is OutputFormat.JSON:
        import json

        console.print(json.dumps(records, indent=2))

    if fail_on_unknown and any_unknown:
        ctx.exit(ExitCode.UNKNOWN_TYPE)
