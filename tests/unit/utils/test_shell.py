"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from dotular.utils.shell import (
    CommandCancelledError,
    CommandError,
    CommandResult,
    ShellError,
    ShellEvaluator,
    check_call,
    command_exists,
    run_command,
    run_interactive,
    shell_args,
)


class TestRunCommand:
    """Tests for run_command function."""

    @patch("dotular.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns stdout, stderr and the exit code."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=2)

        result = run_command(["ls"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=2)
        assert not result.success
        assert mock_run.call_args.kwargs["capture_output"] is True

    @patch("dotular.utils.shell.subprocess.run")
    def test_timeout_passed(self, mock_run: MagicMock) -> None:
        """The timeout is forwarded to subprocess."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["ls"], timeout=None)

        assert mock_run.call_args.kwargs["timeout"] is None


class TestRunInteractive:
    """Tests for run_interactive function."""

    @patch("dotular.utils.shell.subprocess.run")
    def test_returns_exit_code(self, mock_run: MagicMock) -> None:
        """run_interactive returns the subprocess exit code."""
        mock_run.return_value = MagicMock(returncode=3)

        assert run_interactive(["false"]) == 3

    @patch("dotular.utils.shell.subprocess.run")
    def test_does_not_capture_output(self, mock_run: MagicMock) -> None:
        """Output is inherited from the terminal."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["echo", "hello"])

        assert "capture_output" not in mock_run.call_args.kwargs
        assert "stdout" not in mock_run.call_args.kwargs

    @patch("dotular.utils.shell.subprocess.run")
    def test_merges_env(self, mock_run: MagicMock) -> None:
        """Custom env is merged with the current environment."""
        mock_run.return_value = MagicMock(returncode=0)

        with patch.dict("os.environ", {"EXISTING": "1"}):
            run_interactive(["env"], env={"EXTRA": "2"})

        env = mock_run.call_args.kwargs["env"]
        assert env["EXISTING"] == "1"
        assert env["EXTRA"] == "2"

    @patch("dotular.utils.shell.subprocess.run", side_effect=KeyboardInterrupt)
    def test_interrupt_becomes_cancelled(self, _mock_run: MagicMock) -> None:
        """An interrupt is reported as CommandCancelledError."""
        with pytest.raises(CommandCancelledError, match="was cancelled") as exc_info:
            run_interactive(["sleep", "10"])

        assert isinstance(exc_info.value, ShellError)

    @patch("dotular.utils.shell.subprocess.run", side_effect=FileNotFoundError("nope"))
    def test_missing_executable(self, _mock_run: MagicMock) -> None:
        """A missing executable raises ShellError."""
        with pytest.raises(ShellError, match="cannot execute"):
            run_interactive(["does-not-exist"])


class TestHelpers:
    """Tests for shell_args, check_call and command_exists."""

    @patch("dotular.utils.shell.sys.platform", "linux")
    def test_shell_args_posix(self) -> None:
        """POSIX systems use sh -c."""
        assert shell_args("ls -la") == ["sh", "-c", "ls -la"]

    @patch("dotular.utils.shell.sys.platform", "win32")
    def test_shell_args_windows(self) -> None:
        """Windows uses PowerShell."""
        assert shell_args("dir") == ["powershell", "-Command", "dir"]

    @patch("dotular.utils.shell.run_interactive", return_value=1)
    def test_check_call_raises(self, _mock: MagicMock) -> None:
        """check_call raises CommandError on non-zero exit."""
        with pytest.raises(CommandError) as exc_info:
            check_call(["brew", "install", "git"])

        assert exc_info.value.returncode == 1
        assert exc_info.value.command == "brew install git"

    @patch("dotular.utils.shell.shutil.which", return_value=None)
    def test_command_exists(self, _mock: MagicMock) -> None:
        """command_exists reflects shutil.which."""
        assert not command_exists("nope")


class TestShellEvaluator:
    """Tests for ShellEvaluator against a real shell."""

    def test_run_success(self) -> None:
        """A zero exit does not raise."""
        ShellEvaluator().run("true")

    def test_run_failure(self) -> None:
        """A non-zero exit raises CommandError with the status."""
        with pytest.raises(CommandError) as exc_info:
            ShellEvaluator().run("exit 4")

        assert exc_info.value.returncode == 4
        assert exc_info.value.command == "exit 4"

    def test_eval(self) -> None:
        """eval reports the exit status as a bool."""
        shell = ShellEvaluator()

        assert shell.eval("true") is True
        assert shell.eval("false") is False

    @patch("dotular.utils.shell.subprocess.run", side_effect=OSError("no sh"))
    def test_eval_execution_error(self, _mock: MagicMock) -> None:
        """Only a failure to execute raises from eval."""
        with pytest.raises(ShellError):
            ShellEvaluator().eval("true")


def test_timeout_is_subprocess_error() -> None:
    """TimeoutExpired from run_command propagates unchanged."""
    with (
        patch(
            "dotular.utils.shell.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["x"], 1),
        ),
        pytest.raises(subprocess.TimeoutExpired),
    ):
        run_command(["x"], timeout=1)
