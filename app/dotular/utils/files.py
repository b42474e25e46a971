"""Filesystem helpers shared by actions and snapshots."""

import shutil
from pathlib import Path


def path_exists(path: Path) -> bool:
    """True if ``path`` exists, including dangling symlinks."""
    return path.exists() or path.is_symlink()


def is_real_dir(path: Path) -> bool:
    """True for a directory that is not a symlink to one."""
    return path.is_dir() and not path.is_symlink()


def copy_path(src: Path, dst: Path) -> None:
    """Copy a file, symlink, or directory tree to ``dst``.

    Symlinks are copied as symlinks. Directory trees are merged into an
    existing ``dst``. Parent directories of ``dst`` are created.

    Raises:
        OSError: If the copy fails.
    """
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.is_symlink() and not is_real_dir(src):
        # replace the link itself instead of writing through it
        dst.unlink()
    if src.is_symlink():
        if path_exists(dst):
            remove_path(dst)
        dst.symlink_to(src.readlink())
    elif src.is_dir():
        shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dst)


def remove_path(path: Path) -> None:
    """Remove a file, symlink, or directory tree.

    Raises:
        OSError: If removal fails.
    """
    if is_real_dir(path):
        shutil.rmtree(path)
    else:
        path.unlink()


def files_equal(a: Path, b: Path) -> bool:
    """Compare two files byte for byte."""
    return a.read_bytes() == b.read_bytes()
