"""Per-module filesystem snapshots.

A snapshot captures the state of every path a module is about to mutate so
that a failed apply can be rolled back. Existing paths are copied into a
private temporary directory; paths that did not exist are remembered so
rollback can delete them.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from dotular.utils.files import copy_path, path_exists, remove_path

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot cannot be created, recorded, or restored."""


class Snapshot:
    """Reversible record of filesystem state for one module apply.

    Recorded paths are kept in a single journal, in recording order. Each
    entry is either:

    - saved: the path existed and a copy lives under the snapshot
      directory, keyed by recording order (``0``, ``1``, ...).
    - created: the path did not exist and is deleted on restore.

    Restoring walks the journal backwards, so a path recorded inside an
    earlier-recorded directory is undone before that directory is.

    A snapshot is owned by a single apply and is consumed by either
    :meth:`restore` followed by :meth:`discard`, or :meth:`discard` alone.
    """

    def __init__(self, directory: Path) -> None:
        """Initialize a snapshot backed by ``directory``.

        Use :meth:`create` to allocate a fresh private directory.
        """
        self._dir = directory
        # (live path, backup path or None when the path was created)
        self._journal: list[tuple[Path, Path | None]] = []
        self._next_key = 0

    @classmethod
    def create(cls) -> "Snapshot":
        """Allocate an empty snapshot in a new temporary directory.

        Raises:
            SnapshotError: If the temporary directory cannot be created.
        """
        try:
            directory = Path(tempfile.mkdtemp(prefix="dotular-snap-"))
        except OSError as e:
            raise SnapshotError(f"create snapshot dir: {e}") from e
        logger.debug("Created snapshot at %s", directory)
        return cls(directory)

    @property
    def directory(self) -> Path:
        """Private backup directory."""
        return self._dir

    @property
    def saved(self) -> dict[Path, Path]:
        """Mapping of live path to backup location, in recording order."""
        return {target: backup for target, backup in self._journal if backup is not None}

    @property
    def created(self) -> tuple[Path, ...]:
        """Paths that did not exist when recorded."""
        return tuple(target for target, backup in self._journal if backup is None)

    def is_recorded(self, path: Path | str) -> bool:
        """Whether ``path`` has already been recorded."""
        key = Path(path).absolute()
        return any(target == key for target, _ in self._journal)

    def record(self, path: Path | str) -> None:
        """Capture the current state of ``path``.

        Recording the same path twice is a no-op. A symlink to a directory
        is saved as a link, and the directory it points to is recorded as
        well, since writes through the link land there.

        Raises:
            SnapshotError: If an existing path cannot be copied.
        """
        target = Path(path).absolute()
        if self.is_recorded(target):
            return

        if not path_exists(target):
            self._journal.append((target, None))
            logger.debug("Snapshot: %s does not exist yet", target)
            return

        backup = self._dir / str(self._next_key)
        self._next_key += 1
        try:
            copy_path(target, backup)
        except OSError as e:
            raise SnapshotError(f"snapshot {target}: {e}") from e
        self._journal.append((target, backup))
        logger.debug("Snapshot: saved %s as %s", target, backup.name)

        if target.is_symlink() and target.is_dir():
            self.record(target.resolve())

    def restore(self) -> None:
        """Put every recorded path back the way it was.

        Entries are undone newest first. Saved paths are replaced with their
        backups; directories are removed first so files added since the
        snapshot disappear too. Created paths are deleted. Every entry is
        attempted even when some fail.

        Raises:
            SnapshotError: The first failure encountered, after all paths
                have been attempted.
        """
        first: SnapshotError | None = None

        for target, backup in reversed(self._journal):
            try:
                if path_exists(target):
                    remove_path(target)
                if backup is not None:
                    copy_path(backup, target)
            except OSError as e:
                action = "remove" if backup is None else "restore"
                logger.warning("Snapshot: failed to %s %s: %s", action, target, e)
                if first is None:
                    first = SnapshotError(f"{action} {target}: {e}")
                    first.__cause__ = e

        if first is not None:
            raise first

    def discard(self) -> None:
        """Delete the private backup directory."""
        shutil.rmtree(self._dir, ignore_errors=True)
        logger.debug("Discarded snapshot at %s", self._dir)
