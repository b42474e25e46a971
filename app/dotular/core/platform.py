"""Platform detection and path expansion."""

import os
import platform

# Package managers that only exist on one operating system. Managers not
# listed here (nix, flatpak, ...) are treated as cross-platform.
PACKAGE_MANAGER_OS: dict[str, str] = {
    "brew": "darwin",
    "brew-cask": "darwin",
    "mas": "darwin",
    "winget": "windows",
    "choco": "windows",
    "scoop": "windows",
    "apt": "linux",
    "apt-get": "linux",
    "dnf": "linux",
    "yum": "linux",
    "pacman": "linux",
    "snap": "linux",
}


def current_os() -> str:
    """Return the current OS as "darwin", "linux" or "windows"."""
    return platform.system().lower()


def current_arch() -> str:
    """Return the machine architecture (e.g. "x86_64", "arm64")."""
    return platform.machine().lower()


def expand_path(path: str) -> str:
    """Expand a leading ``~`` and environment variables in ``path``."""
    return os.path.expandvars(os.path.expanduser(path))


def package_manager_os(manager: str | None) -> str | None:
    """Map a package manager to the OS it runs on.

    Returns:
        The OS name, or None when the manager is not OS-specific.
    """
    if not manager:
        return None
    return PACKAGE_MANAGER_OS.get(manager)
