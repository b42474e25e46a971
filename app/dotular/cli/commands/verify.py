"""Verify command implementation.

Runs each item's ``verify`` check without modifying anything.
"""

from typing import Annotated

import typer

from dotular.cli.types import create_executor, get_options, load_config_or_exit, select_modules
from dotular.utils.formatting import print_error, print_success

ModuleNames = Annotated[
    list[str] | None,
    typer.Argument(
        help="Modules to verify. Verifies every tag-matching module if omitted.",
        show_default=False,
    ),
]


def verify(ctx: typer.Context, modules: ModuleNames = None) -> None:
    """Run verify checks without modifying anything.

    Exits with code 1 if any check fails.

    Examples:
        dotular verify
        dotular verify "Visual Studio Code"
    """
    options = get_options(ctx)
    config = load_config_or_exit(options)
    selected = select_modules(config, modules) if modules else None

    executor = create_executor(options, command="verify", dry_run=False, atomic=False)
    if selected is None:
        all_passed = executor.verify_all(config.modules)
    else:
        all_passed = True
        for module in selected:
            if not executor.verify_module(module):
                all_passed = False

    if not all_passed:
        print_error("some verify checks failed")
        raise typer.Exit(code=1)
    print_success("\nAll verify checks passed.")
