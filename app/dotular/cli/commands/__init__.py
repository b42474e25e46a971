"""CLI commands for dotular.

This package contains all subcommand implementations.
"""

from dotular.cli.commands import apply, direction, log, modules, platform, status, tag, verify

__all__ = ["apply", "direction", "log", "modules", "platform", "status", "tag", "verify"]
