"""Tag commands for managing machine tags.

Tags are stored in ~/.config/dotular/machine.toml and gate which modules
apply to this machine.
"""

from typing import Annotated

import typer

from dotular.core.paths import get_machine_config_path
from dotular.core.tags import TagsError, add_tag, ensure_initialised, load_machine_config
from dotular.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage machine tags.",
    no_args_is_help=True,
)


def _ensure_initialised_or_exit() -> None:
    try:
        ensure_initialised()
    except TagsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command("list")
def list_tags() -> None:
    """Print current machine tags."""
    _ensure_initialised_or_exit()
    try:
        config = load_machine_config()
    except TagsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(f"machine config: {get_machine_config_path()}", style="muted", highlight=False)
    if not config.tags:
        print_info("(no tags)")
        return
    for tag in config.tags:
        console.print(f"  - {tag}", highlight=False)


@app.command("add")
def add(
    tag: Annotated[str, typer.Argument(help="Tag to add to this machine.")],
) -> None:
    """Add a tag to this machine."""
    _ensure_initialised_or_exit()
    try:
        added = add_tag(tag)
    except TagsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if added:
        print_success(f'added tag "{tag}"')
    else:
        print_info(f'tag "{tag}" already present')
