"""Shared types and helpers for CLI commands.

Global options are stored on the Typer context by the root callback; the
helpers here turn them into a loaded config and a configured executor.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from dotular.core.audit import AuditLog, AuditSink
from dotular.core.builder import ActionBuilder
from dotular.core.config import ConfigError, config_root, load_config
from dotular.core.executor import ModuleExecutor
from dotular.core.paths import get_default_config_path
from dotular.core.platform import current_os
from dotular.core.tags import TagsError, ensure_initialised, load_machine_tags
from dotular.models.config import Config, Direction, Module
from dotular.utils.formatting import print_error
from dotular.utils.shell import ShellEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlobalOptions:
    """Options given before the command name."""

    config_path: Path
    dry_run: bool = False
    verbose: bool = False
    atomic: bool = True


def get_options(ctx: typer.Context) -> GlobalOptions:
    """Read the global options stored by the root callback."""
    obj = ctx.find_root().obj or {}
    return GlobalOptions(
        config_path=obj.get("config_path") or get_default_config_path(),
        dry_run=obj.get("dry_run", False),
        verbose=obj.get("verbose", False),
        atomic=obj.get("atomic", True),
    )


def load_config_or_exit(options: GlobalOptions) -> Config:
    """Load the config file, exiting with code 1 on any config error."""
    try:
        return load_config(options.config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def select_modules(config: Config, names: list[str]) -> list[Module]:
    """Look up modules by name, exiting with code 1 if one is unknown."""
    modules: list[Module] = []
    for name in names:
        module = config.module(name)
        if module is None:
            print_error(f'module "{name}" not found in config')
            raise typer.Exit(code=1)
        modules.append(module)
    return modules


def machine_tags() -> list[str]:
    """Tags of this machine, initialising machine.toml on first use."""
    try:
        ensure_initialised()
    except TagsError as e:
        logger.warning("Could not initialise machine config: %s", e)
    return load_machine_tags()


def create_executor(
    options: GlobalOptions,
    *,
    command: str = "apply",
    direction_override: Direction | None = None,
    dry_run: bool | None = None,
    verbose: bool | None = None,
    atomic: bool | None = None,
    audit: AuditSink | None = None,
) -> ModuleExecutor:
    """Create an executor wired to the real shell, audit log and machine tags.

    Keyword overrides take precedence over the global options.
    """
    return ModuleExecutor(
        builder=ActionBuilder(source_root=config_root(options.config_path)),
        shell=ShellEvaluator(),
        audit=audit if audit is not None else AuditLog(),
        os_name=current_os(),
        machine_tags=machine_tags(),
        dry_run=options.dry_run if dry_run is None else dry_run,
        verbose=options.verbose if verbose is None else verbose,
        atomic=options.atomic if atomic is None else atomic,
        command=command,
        direction_override=direction_override,
    )
