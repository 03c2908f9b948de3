# topmark:header:start
#
#   project      : ZipSniff
#   file         : signatures.py
#   file_relpath : src/zipsniff/cli/commands/signatures.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ZipSniff `signatures` command.

Lists the leading-byte signatures consulted before any container parsing and
the entry rules of the signature catalog, in evaluation order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from zipsniff.catalog.catalog import get_signature_catalog
from zipsniff.cli.cmd_common import get_console
from zipsniff.cli.options import OutputFormat, output_format_option
from zipsniff.signatures.table import get_byte_signature_table

if TYPE_CHECKING:
    from zipsniff.catalog.base import SignatureRule
    from zipsniff.catalog.catalog import SignatureCatalog
    from zipsniff.cli.console import ClickConsole
    from zipsniff.signatures.base import ByteSignature
    from zipsniff.signatures.table import ByteSignatureTable


def _signature_record(sig: ByteSignature) -> dict[str, Any]:
    return {
        "kind": "byte_signature",
        "name": sig.name,
        "media_type": str(sig.media_type),
        "offset": sig.offset,
        "pattern": sig.pattern.hex(),
        "description": sig.description,
    }


def _describe_predicate(rule: SignatureRule) -> str:
    if rule.entry_name is not None:
        text = f"name == {rule.entry_name!r}"
    elif rule.entry_prefix is not None:
        text = f"name startswith {rule.entry_prefix!r}"
    elif rule.entry_suffix is not None:
        text = f"name endswith {rule.entry_suffix!r}"
    else:
        text = f"name ~ {rule.entry_pattern!r}"
    if rule.content_equals is not None:
        text += f" and content == {rule.content_equals.decode('utf-8', 'replace')!r}"
    elif rule.content_contains is not None:
        text += f" and content contains {rule.content_contains.decode('utf-8', 'replace')!r}"
    return text


def _rule_record(rule: SignatureRule) -> dict[str, Any]:
    return {
        "kind": "rule",
        "name": rule.name,
        "media_type": str(rule.media_type),
        "priority": rule.priority.name.lower(),
        "predicate": _describe_predicate(rule),
        "description": rule.description,
    }


@click.command(
    name="signatures",
    help="List byte signatures and container entry rules.",
)
@output_format_option
@click.pass_context
def signatures_command(ctx: click.Context, *, output_format: OutputFormat | None) -> None:
    """List byte signatures and container entry rules in evaluation order."""
    console: ClickConsole = get_console(ctx)
    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    table: ByteSignatureTable = get_byte_signature_table()
    catalog: SignatureCatalog = get_signature_catalog()

    records: list[dict[str, Any]] = [_signature_record(sig) for sig in table.signatures]
    records.extend(_rule_record(rule) for _, rule in catalog.ordered())

    if fmt is OutputFormat.JSON:
        import json

        console.print(json.dumps(records, indent=2))
        return
    if fmt is OutputFormat.NDJSON:
        import json

        for record in records:
            console.print(json.dumps(record))
        return

    console.print(console.styled("Byte signatures:", bold=True, underline=True))
    for sig in table.signatures:
        console.print(f"  {sig.name:<24} {sig.media_type}")
    console.print()
    console.print(console.styled("Container entry rules:", bold=True, underline=True))
    for _, rule in catalog.ordered():
        priority: str = console.styled(f"{rule.priority.name.lower():<16}", dim=True)
        console.print(f"  {priority} {rule.name:<32} {rule.media_type}")
        console.print(f"      {_describe_predicate(rule)}")
