"""Utility modules for dotular.

This module exports commonly used utility functions.
"""

from dotular.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from dotular.utils.shell import (
    CommandCancelledError,
    CommandError,
    CommandResult,
    ShellError,
    ShellEvaluator,
    command_exists,
    run_command,
)

__all__ = [
    "CommandCancelledError",
    "CommandError",
    "CommandResult",
    "ShellError",
    "ShellEvaluator",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
