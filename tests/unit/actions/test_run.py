"""Unit tests for the inline run action."""

from unittest.mock import MagicMock, patch

import pytest
from dotular.actions.run import RunAction
from dotular.utils.shell import CommandError


class TestRunAction:
    """Tests for RunAction."""

    def test_describe(self) -> None:
        """The description quotes the command."""
        assert RunAction("echo hi").describe() == 'run "echo hi"'

    @patch("dotular.actions.run.check_call")
    def test_runs_through_shell(self, mock_call: MagicMock) -> None:
        """The command runs via the platform shell."""
        RunAction("echo hi").run()

        assert mock_call.call_args.args[0][-1] == "echo hi"

    def test_failure_raises(self) -> None:
        """A non-zero exit raises CommandError."""
        with pytest.raises(CommandError):
            RunAction("exit 3").run()

    def test_success(self) -> None:
        """A zero exit succeeds."""
        RunAction("true").run()
