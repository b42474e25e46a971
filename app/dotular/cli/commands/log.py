"""Log command for viewing the audit log.

Every item applied, skipped or failed by apply, push, pull, sync and
verify is recorded in ~/.local/state/dotular/audit.jsonl.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from dotular.core.audit import AuditLog
from dotular.models.audit import AuditEntry, AuditOutcome
from dotular.utils.formatting import console, print_error, print_info

OUTCOME_STYLES = {
    AuditOutcome.SUCCESS: "success",
    AuditOutcome.SKIPPED: "muted",
    AuditOutcome.FAILURE: "error",
}


def log(
    module: Annotated[
        str | None,
        typer.Option(
            "--module",
            "-m",
            help="Only show entries for this module.",
        ),
    ] = None,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 50,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON lines.",
        ),
    ] = False,
) -> None:
    """Show the audit log.

    Examples:
        dotular log
        dotular log --module homebrew
        dotular log --limit 20 --json
    """
    audit = AuditLog()
    try:
        entries = audit.read(module=module, limit=limit)
    except OSError as e:
        print_error(f"Failed to read audit log: {e}")
        raise typer.Exit(code=1) from e

    if not entries:
        print_info("(no log entries)")
        return

    if json_output:
        for entry in entries:
            typer.echo(json.dumps(entry.to_dict()))
        return

    _print_table(entries)
    console.print(f"\nlog: {audit.path}", style="muted", highlight=False)


def _print_table(entries: list[AuditEntry]) -> None:
    """Print audit entries as a Rich table."""
    table = Table(title="Audit Log")
    table.add_column("Time", style="muted")
    table.add_column("Command")
    table.add_column("Module", style="module")
    table.add_column("Outcome")
    table.add_column("Item")

    for entry in entries:
        outcome = entry.outcome.value
        if entry.error:
            outcome += f" ({entry.error})"
        table.add_row(
            _format_timestamp(entry.time),
            escape(entry.command),
            escape(entry.module),
            f"[{OUTCOME_STYLES[entry.outcome]}]{escape(outcome)}[/]",
            escape(entry.item),
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp as local YYYY-MM-DD HH:MM:SS."""
    try:
        dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    except ValueError:
        return iso_timestamp
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")
