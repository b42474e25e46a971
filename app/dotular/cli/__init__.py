"""CLI package for dotular.

This package contains the Typer application and all subcommands.
"""

from dotular.cli.main import app

__all__ = ["app"]
