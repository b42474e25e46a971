"""Inline shell command action."""

from dotular.actions.base import Action
from dotular.utils.shell import check_call, shell_args


class RunAction(Action):
    """Execute an inline shell command declared in the module.

    ``after`` records which item kind this step logically follows. It is
    informational only: ordering comes from the item's position in the
    module.
    """

    def __init__(self, command: str, after: str | None = None) -> None:
        self.command = command
        self.after = after

    def describe(self) -> str:
        suffix = f" (after {self.after})" if self.after else ""
        return f'run "{self.command}"{suffix}'

    def run(self, dry_run: bool = False) -> None:
        if dry_run:
            self.print_dry_run()
            return
        check_call(shell_args(self.command))
