"""Unit tests for the system setting action."""

from unittest.mock import MagicMock, patch

import pytest
from dotular.actions.base import ActionError
from dotular.actions.setting import SettingAction, defaults_value_args


class TestDefaultsValueArgs:
    """Tests for defaults write type flags."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, ("-bool", "true")),
            (False, ("-bool", "false")),
            (42, ("-int", "42")),
            (0.5, ("-float", "0.5")),
            ("Dark", ("-string", "Dark")),
        ],
    )
    def test_types(self, value: bool | int | float | str, expected: tuple[str, str]) -> None:
        """Each value type gets its flag."""
        assert defaults_value_args(value) == expected


class TestSettingAction:
    """Tests for SettingAction."""

    @patch("dotular.actions.setting.check_call")
    def test_darwin_writes_default(self, mock_call: MagicMock) -> None:
        """On macOS defaults write is called."""
        SettingAction("com.apple.dock", "autohide", True, os_name="darwin").run()

        mock_call.assert_called_once_with(
            ["defaults", "write", "com.apple.dock", "autohide", "-bool", "true"]
        )

    @patch("dotular.actions.setting.check_call")
    def test_other_os_unsupported(self, mock_call: MagicMock) -> None:
        """Other platforms raise."""
        with pytest.raises(ActionError, match="not supported on linux"):
            SettingAction("com.apple.dock", "autohide", True, os_name="linux").run()

        mock_call.assert_not_called()

    def test_dry_run_on_any_os(self) -> None:
        """Dry-run never fails, even where settings are unsupported."""
        SettingAction("d", "k", 1, os_name="windows").run(dry_run=True)

    def test_describe(self) -> None:
        """The description shows domain, key and value."""
        assert SettingAction("d", "k", 1, os_name="darwin").describe() == "set d k = 1"
