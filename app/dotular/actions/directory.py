"""Directory tree copy, link, and sync action."""

from pathlib import Path

from dotular.actions.base import Action, ActionError, Idempotent
from dotular.core.platform import expand_path
from dotular.models.config import Direction
from dotular.utils.files import copy_path, is_real_dir
from dotular.utils.formatting import print_detail


class DirectoryAction(Action, Idempotent):
    """Manage a whole directory tree between the repo and the system.

    - push (default): copy repo tree -> system.
    - pull: copy system tree -> repo.
    - sync: push if the system copy is missing, pull if the repo copy is
      missing, push if both exist (use file items for per-file sync).

    With ``link`` the destination becomes a symlink to the repo directory.
    An existing real directory at the destination is never replaced by a
    link.
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
        """Fully expanded destination directory.

        If the destination already ends with the source directory name it is
        used as-is, otherwise the source basename is appended.
        """
        expanded = Path(expand_path(self.destination))
        if expanded.name == self.source.name:
            return expanded
        return expanded / self.source.name

    def describe(self) -> str:
        target = self.resolved_target()
        if self.link:
            return f"link-dir  {self.source} -> {target}"
        if self.direction == Direction.PULL:
            return f"pull-dir  {self.source} <- {target}"
        if self.direction == Direction.SYNC:
            return f"sync-dir  {self.source} <-> {target}"
        return f"push-dir  {self.source} -> {target}"

    def is_applied(self) -> bool:
        """True when a link item's symlink already points at the source."""
        if not self.link:
            return False
        target = self.resolved_target()
        if not target.is_symlink():
            return False
        return target.readlink() == self.source.absolute()

    def run(self, dry_run: bool = False) -> None:
        if dry_run:
            self.print_dry_run()
            return

        target = self.resolved_target()
        try:
            if self.link:
                self._link(target)
            elif self.direction == Direction.PULL:
                self._copy_tree(target, self.source)
            elif self.direction == Direction.SYNC:
                self._sync(target)
            else:
                self._copy_tree(self.source, target)
        except OSError as e:
            msg = f"{self.describe()}: {e}"
            raise ActionError(msg) from e

    def _link(self, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink():
            target.unlink()
        elif target.exists():
            msg = f"destination exists and is not a symlink: {target}"
            raise ActionError(msg)
        target.symlink_to(self.source.absolute(), target_is_directory=True)

    def _sync(self, target: Path) -> None:
        repo_exists = is_real_dir(self.source)
        sys_exists = target.is_dir()
        if not repo_exists and not sys_exists:
            msg = f"sync-dir: neither repo nor system directory exists ({self.source.name})"
            raise ActionError(msg)
        if repo_exists and not sys_exists:
            print_detail("  sync-dir: system copy missing, pushing")
            self._copy_tree(self.source, target)
        elif sys_exists and not repo_exists:
            print_detail("  sync-dir: repo copy missing, pulling")
            self._copy_tree(target, self.source)
        else:
            print_detail("  sync-dir: both exist, pushing repo -> system")
            self._copy_tree(self.source, target)

    def _copy_tree(self, src: Path, dst: Path) -> None:
        if not src.is_dir():
            msg = f"directory does not exist: {src}"
            raise ActionError(msg)
        copy_path(src, dst)
        if self.permissions:
            mode = int(self.permissions, 8)
            for path in dst.rglob("*"):
                if path.is_file() and not path.is_symlink():
                    path.chmod(mode)
