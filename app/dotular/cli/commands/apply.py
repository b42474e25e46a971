"""Apply command implementation.

Applies modules to this machine: all tag-matching modules, or the named
ones regardless of tags.
"""

from typing import Annotated

import typer

from dotular.cli.types import create_executor, get_options, load_config_or_exit, select_modules
from dotular.core.executor import ApplyError
from dotular.models.config import Direction
from dotular.utils.formatting import print_error

ModuleNames = Annotated[
    list[str] | None,
    typer.Argument(
        help="Modules to apply. Applies every tag-matching module if omitted.",
        show_default=False,
    ),
]


def run_apply(
    ctx: typer.Context,
    names: list[str] | None,
    *,
    command: str = "apply",
    direction_override: Direction | None = None,
) -> None:
    """Load the config and apply the selected modules.

    Args:
        ctx: Typer context carrying the global options.
        names: Explicit module names, or None/empty for all modules.
        command: Command name recorded in the audit log.
        direction_override: Direction forced on non-link file items.

    Raises:
        typer.Exit: With code 1 if the config is invalid, a module is
            unknown, or a module fails to apply.
    """
    options = get_options(ctx)
    config = load_config_or_exit(options)
    selected = select_modules(config, names) if names else None

    executor = create_executor(
        options, command=command, direction_override=direction_override
    )
    try:
        if selected is None:
            executor.apply_all(config.modules)
        else:
            # Explicitly named modules bypass tag filters
            for module in selected:
                executor.apply_module(module)
    except ApplyError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def apply(ctx: typer.Context, modules: ModuleNames = None) -> None:
    """Apply modules (all if none specified).

    Examples:
        dotular apply
        dotular apply homebrew "Visual Studio Code"
        dotular --dry-run apply
        dotular --no-atomic apply
    """
    run_apply(ctx, modules)
