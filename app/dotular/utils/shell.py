"""Shell execution utilities.

Provides safe subprocess execution with proper error handling, plus the
``sh -c`` evaluator used for hooks, ``skip_if`` guards and ``verify`` checks.
"""

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass


class ShellError(Exception):
    """Raised when a command cannot be executed at all."""


class CommandError(ShellError):
    """Raised when a command runs but exits with a non-zero status.

    Attributes:
        command: The command that failed.
        returncode: Exit status of the command.
    """

    def __init__(self, command: str, returncode: int) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"command {command!r} exited with status {returncode}")


class CommandCancelledError(ShellError):
    """Raised when a running command is interrupted by the caller."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"command {command!r} was cancelled")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command, capturing its output.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_interactive(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command interactively, inheriting the terminal.

    Unlike run_command(), this does NOT capture stdout/stderr, so package
    managers and scripts can prompt the user directly. There is no timeout;
    an interrupt from the terminal terminates the child and is reported as
    :class:`CommandCancelledError`.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        ShellError: If the executable cannot be started.
        CommandCancelledError: If the command was interrupted.
    """
    full_env = {**os.environ, **(env or {})}
    try:
        result = subprocess.run(
            args,
            check=False,
            cwd=cwd,
            env=full_env,
        )
    except KeyboardInterrupt:
        # subprocess.run() kills the child before re-raising
        raise CommandCancelledError(" ".join(args)) from None
    except OSError as e:
        msg = f"cannot execute {args[0]!r}: {e}"
        raise ShellError(msg) from e
    return result.returncode


def shell_args(command: str) -> list[str]:
    """Build the argv that runs ``command`` through the platform shell."""
    if sys.platform == "win32":
        return ["powershell", "-Command", command]
    return ["sh", "-c", command]


def check_call(args: list[str], *, cwd: str | None = None) -> None:
    """Run a command interactively and raise if it exits non-zero.

    Raises:
        CommandError: If the command exits with a non-zero status.
        ShellError: If the executable cannot be started.
    """
    returncode = run_interactive(args, cwd=cwd)
    if returncode != 0:
        raise CommandError(" ".join(args), returncode)


class ShellEvaluator:
    """Runs user-supplied shell snippets (hooks, ``skip_if``, ``verify``).

    Output is inherited from the terminal so hook and check output stays
    visible to the user.
    """

    def run(self, command: str) -> None:
        """Run ``command`` and raise if it exits non-zero.

        Raises:
            CommandError: On non-zero exit.
            ShellError: If the shell itself cannot be started.
        """
        returncode = run_interactive(shell_args(command))
        if returncode != 0:
            raise CommandError(command, returncode)

    def eval(self, command: str) -> bool:
        """Run ``command`` and report whether it exited zero.

        A non-zero exit is a normal ``False`` result; only a failure to
        execute the shell raises.
        """
        return run_interactive(shell_args(command)) == 0
