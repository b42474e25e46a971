"""Abstract base classes for actions.

An action is the runtime, OS-resolved form of one configuration item.
Actions may additionally implement :class:`Idempotent` to report that their
effect is already in place.
"""

from abc import ABC, abstractmethod

from dotular.utils.formatting import print_dry_run


class ActionError(Exception):
    """Raised when an action fails to run."""


class Action(ABC):
    """A single executable step produced from a config item.

    Example:
        >>> action = RunAction(command="echo hi")
        >>> action.describe()
        'run "echo hi"'
        >>> action.run(dry_run=True)
    """

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable summary of the action."""

    @abstractmethod
    def run(self, dry_run: bool = False) -> None:
        """Execute the action.

        Args:
            dry_run: If True, only print what would happen.

        Raises:
            ActionError: If the action fails.
            ShellError: If an external command fails or is cancelled.
        """

    def print_dry_run(self) -> None:
        """Print the dry-run line for this action."""
        print_dry_run(self.describe())


class Idempotent(ABC):
    """Optional capability: detect that an action's effect already exists."""

    @abstractmethod
    def is_applied(self) -> bool:
        """Return True when running the action would change nothing.

        Must be read-only.
        """
