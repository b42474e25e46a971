"""Status command implementation."""

import typer

from dotular.cli.types import create_executor, get_options, load_config_or_exit
from dotular.core.audit import NullAuditSink
from dotular.core.executor import ApplyError
from dotular.utils.formatting import print_error


def status(ctx: typer.Context) -> None:
    """Show what would be applied for the current platform.

    Performs a verbose dry run of every module. Nothing is changed and
    nothing is written to the audit log.
    """
    options = get_options(ctx)
    config = load_config_or_exit(options)

    executor = create_executor(
        options,
        command="status",
        dry_run=True,
        verbose=True,
        atomic=False,
        audit=NullAuditSink(),
    )
    try:
        executor.apply_all(config.modules)
    except ApplyError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
