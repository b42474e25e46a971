"""List command implementation."""

import typer
from rich.table import Table

from dotular.cli.types import get_options, load_config_or_exit
from dotular.utils.formatting import console, print_info


def list_modules(ctx: typer.Context) -> None:
    """List all modules defined in the config."""
    options = get_options(ctx)
    config = load_config_or_exit(options)

    if not config.modules:
        print_info("No modules defined.")
        return

    table = Table(title="Modules")
    table.add_column("Module", style="module")
    table.add_column("Items", justify="right")
    table.add_column("Only", style="muted")
    table.add_column("Exclude", style="muted")

    for module in config.modules:
        table.add_row(
            module.name,
            str(len(module.items)),
            ", ".join(module.only_tags),
            ", ".join(module.exclude_tags),
        )

    console.print(table)
