"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from dotular import __version__
from dotular.cli.commands import apply, direction, log, modules, platform, status, tag, verify
from dotular.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="dotular",
    help="A modular, cross-platform dotfile manager.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dotular version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log at DEBUG level instead of WARNING.
    """
    root = logging.getLogger("dotular")
    root.handlers.clear()
    root.addHandler(RichHandler(console=err_console, show_path=False, show_time=False))
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file [default: ./dotular.toml].",
            dir_okay=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Print actions without executing them.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show skipped items and extra output.",
        ),
    ] = False,
    no_atomic: Annotated[
        bool,
        typer.Option(
            "--no-atomic",
            help="Disable snapshot/rollback per module.",
        ),
    ] = False,
) -> None:
    """dotular - A modular, cross-platform dotfile manager.

    Manage dotfiles and system configuration across macOS, Windows and
    Linux from a single TOML file.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["dry_run"] = dry_run
    ctx.obj["verbose"] = verbose
    ctx.obj["atomic"] = not no_atomic


# Register commands
app.command("apply")(apply.apply)
app.command("push")(direction.push)
app.command("pull")(direction.pull)
app.command("sync")(direction.sync)
app.command("verify")(verify.verify)
app.command("status")(status.status)
app.command("list")(modules.list_modules)
app.command("platform")(platform.platform)
app.command("log")(log.log)
app.add_typer(tag.app, name="tag")


if __name__ == "__main__":
    app()
