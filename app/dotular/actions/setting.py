"""System preference action."""

from dotular.actions.base import Action, ActionError
from dotular.core.platform import current_os
from dotular.utils.shell import check_call


def defaults_value_args(value: bool | int | float | str) -> tuple[str, str]:
    """Map a config value to a ``defaults write`` type flag and string value."""
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "-bool", "true" if value else "false"
    if isinstance(value, int):
        return "-int", str(value)
    if isinstance(value, float):
        return "-float", repr(value)
    return "-string", str(value)


class SettingAction(Action):
    """Write a system preference.

    On macOS this calls ``defaults write``. Other platforms are not supported.
    """

    def __init__(
        self,
        domain: str,
        key: str,
        value: bool | int | float | str,
        os_name: str | None = None,
    ) -> None:
        self.domain = domain
        self.key = key
        self.value = value
        self.os_name = os_name or current_os()

    def describe(self) -> str:
        return f"set {self.domain} {self.key} = {self.value}"

    def run(self, dry_run: bool = False) -> None:
        if dry_run:
            self.print_dry_run()
            return
        if self.os_name != "darwin":
            msg = f"system settings are not supported on {self.os_name}"
            raise ActionError(msg)
        type_flag, value = defaults_value_args(self.value)
        check_call(["defaults", "write", self.domain, self.key, type_flag, value])
