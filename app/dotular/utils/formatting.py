"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape

from dotular.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")


def print_module_header(name: str, note: str | None = None) -> None:
    """Print the ``==> module`` header that opens each module's output."""
    if note:
        console.print(f"\n[muted]==> {escape(name)}  \\[{escape(note)}][/]")
    else:
        console.print(f"\n[module]==> {escape(name)}[/]")


def print_step(description: str) -> None:
    """Print an action that is about to run."""
    console.print(f"  [muted]->[/] {escape(description)}")


def print_detail(message: str) -> None:
    """Print a dimmed detail line (verbose skips, hook notices)."""
    console.print(f"  [muted]{escape(message)}[/]")


def print_dry_run(description: str) -> None:
    """Print what an action would do in dry-run mode."""
    console.print(f"    [muted]\\[dry-run] {escape(description)}[/]")


def print_check(passed: bool, description: str) -> None:
    """Print a PASS/FAIL line for a verify check."""
    label = "[success]PASS[/]" if passed else "[error]FAIL[/]"
    console.print(f"  {label}  {escape(description)}")
