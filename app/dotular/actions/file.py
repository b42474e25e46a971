"""File copy, link, and sync action.

Direction semantics:

- push: copy repo file -> system destination.
- pull: copy system file -> repo file.
- sync: copy whichever side is missing; when both exist and differ, ask
  the user which side wins.

With ``link`` the destination becomes a symlink to the absolute repo path,
and the action is idempotent: an existing correct symlink means there is
nothing to do.
"""

import logging
from pathlib import Path

from rich.markup import escape
from rich.prompt import Prompt

from dotular.actions.base import Action, ActionError, Idempotent
from dotular.core.platform import expand_path
from dotular.models.config import Direction
from dotular.utils.files import copy_path, files_equal, path_exists, remove_path
from dotular.utils.formatting import console, print_detail

logger = logging.getLogger(__name__)


def parse_mode(permissions: str) -> int:
    """Parse an octal permission string such as "0600".

    Raises:
        ActionError: If the string is not octal.
    """
    try:
        return int(permissions, 8)
    except ValueError:
        msg = f"invalid permissions {permissions!r}"
        raise ActionError(msg) from None


def ask_conflict(name: str) -> str:
    """Ask which side wins a sync conflict.

    Returns:
        "1" to keep the repo copy, "2" to keep the system copy, "s" to skip.
    """
    console.print(f"\n    [warning]CONFLICT: {escape(name)} differs between repo and system[/]")
    console.print("      \\[1] keep repo   (push repo -> system)")
    console.print("      \\[2] keep system (pull system -> repo)")
    console.print("      \\[s] skip")
    return Prompt.ask("    >", choices=["1", "2", "s"], default="s", console=console)


class FileAction(Action, Idempotent):
    """Copy, symlink, or sync a config file between the repo and the system.

    Attributes:
        source: Repo-side file path.
        destination: System-side directory or full file path (may contain
            ``~`` and ``$VARS``).
        direction: Transfer direction.
        link: Create a symlink instead of copying.
        permissions: Octal mode enforced on the destination after writes.
    """

    def __init__(
        self,
        source: Path,
        destination: str,
        direction: Direction = Direction.PUSH,
        link: bool = False,
        permissions: str | None = None,
    ) -> None:
        self.source = Path(source)
        self.destination = destination
        self.direction = direction
        self.link = link
        self.permissions = permissions

    def resolved_target(self) -> Path:
        """Fully expanded destination file path.

        A destination whose last component contains a dot (``~/.wezterm.lua``,
        ``~/.vimrc``) is a complete file path. Anything else, or anything
        ending in "/", is a directory that receives the source basename.
        """
        expanded = Path(expand_path(self.destination))
        if not self.destination.endswith("/") and "." in expanded.name:
            return expanded
        return expanded / self.source.name

    def describe(self) -> str:
        target = self.resolved_target()
        if self.link:
            return f"link   {self.source} -> {target}"
        if self.direction == Direction.PULL:
            return f"pull   {self.source} <- {target}"
        if self.direction == Direction.SYNC:
            return f"sync   {self.source} <-> {target}"
        return f"push   {self.source} -> {target}"

    def permissions_status(self) -> str | None:
        """Annotation describing the destination's mode, or None if not applicable."""
        if not self.permissions or self.link:
            return None
        target = self.resolved_target()
        if not target.exists():
            return None
        try:
            wanted = parse_mode(self.permissions)
        except ActionError:
            return f"[permissions: invalid {self.permissions!r}]"
        actual = target.stat().st_mode & 0o7777
        if actual == wanted:
            return f"[permissions: {self.permissions} ok]"
        return f"[permissions: want {self.permissions}, got {actual:04o}]"

    def is_applied(self) -> bool:
        """True when a link item's symlink already points at the source."""
        if not self.link:
            return False
        target = self.resolved_target()
        if not target.is_symlink():
            return False
        return target.readlink() == self.source.absolute()

    def run(self, dry_run: bool = False) -> None:
        status = self.permissions_status()
        if dry_run:
            self.print_dry_run()
            if status:
                print_detail(f"          {status}")
            return
        if status:
            print_detail(f"   {status}")

        target = self.resolved_target()
        try:
            if self.link:
                self._link(target)
                return
            if self.direction == Direction.PULL:
                self._pull(target)
            elif self.direction == Direction.SYNC:
                self._sync(target)
            else:
                self._push(target)
        except OSError as e:
            msg = f"{self.describe()}: {e}"
            raise ActionError(msg) from e
        self._enforce_permissions(target)

    def _link(self, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        if path_exists(target):
            remove_path(target)
        target.symlink_to(self.source.absolute())

    def _push(self, target: Path) -> None:
        if not self.source.is_file():
            msg = f"push: repo file does not exist: {self.source}"
            raise ActionError(msg)
        copy_path(self.source, target)

    def _pull(self, target: Path) -> None:
        if not target.exists():
            msg = f"pull: system file does not exist: {target}"
            raise ActionError(msg)
        copy_path(target, self.source)

    def _sync(self, target: Path) -> None:
        repo_exists = self.source.is_file()
        sys_exists = target.is_file()

        if not repo_exists and not sys_exists:
            msg = f"sync: neither repo nor system file exists ({self.source.name})"
            raise ActionError(msg)
        if repo_exists and not sys_exists:
            print_detail("  sync: system copy missing, pushing repo -> system")
            copy_path(self.source, target)
            return
        if sys_exists and not repo_exists:
            print_detail("  sync: repo copy missing, pulling system -> repo")
            copy_path(target, self.source)
            return
        if files_equal(self.source, target):
            print_detail("  sync: already in sync")
            return

        choice = ask_conflict(self.source.name)
        if choice == "1":
            print_detail("  pushing repo copy to system")
            copy_path(self.source, target)
        elif choice == "2":
            print_detail("  pulling system copy to repo")
            copy_path(target, self.source)
        else:
            print_detail("  skipped")

    def _enforce_permissions(self, target: Path) -> None:
        if not self.permissions:
            return
        wanted = parse_mode(self.permissions)
        if not target.exists():
            return
        if target.stat().st_mode & 0o7777 != wanted:
            try:
                target.chmod(wanted)
            except OSError as e:
                msg = f"chmod {target} to {self.permissions}: {e}"
                raise ActionError(msg) from e
            logger.debug("Set mode %s on %s", self.permissions, target)
