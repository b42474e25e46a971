"""Push, pull and sync commands.

Each applies modules like ``dotular apply`` while forcing one transfer
direction on every non-link file and directory item.
"""

import typer

from dotular.cli.commands.apply import ModuleNames, run_apply
from dotular.models.config import Direction


def push(ctx: typer.Context, modules: ModuleNames = None) -> None:
    """Push repo files to the system (overrides direction on all file items)."""
    run_apply(ctx, modules, command="push", direction_override=Direction.PUSH)


def pull(ctx: typer.Context, modules: ModuleNames = None) -> None:
    """Pull system files back into the repo (overrides direction on all file items)."""
    run_apply(ctx, modules, command="pull", direction_override=Direction.PULL)


def sync(ctx: typer.Context, modules: ModuleNames = None) -> None:
    """Sync files bidirectionally, prompting on conflicts (overrides direction on all file items)."""
    run_apply(ctx, modules, command="sync", direction_override=Direction.SYNC)
