"""Package manager action.

Installs a package through one of the supported package managers and
checks whether it is already installed before doing so.
"""

import logging
import subprocess

from dotular.actions.base import Action, ActionError, Idempotent
from dotular.utils.shell import check_call, run_command

logger = logging.getLogger(__name__)

# Command prefixes that install a package; the package name is inserted
# where "{pkg}" appears.
INSTALL_COMMANDS: dict[str, list[str]] = {
    "brew": ["brew", "install", "{pkg}"],
    "brew-cask": ["brew", "install", "--cask", "{pkg}"],
    "mas": ["mas", "install", "{pkg}"],
    "winget": ["winget", "install", "--id", "{pkg}", "-e", "--accept-source-agreements"],
    "choco": ["choco", "install", "{pkg}", "-y"],
    "scoop": ["scoop", "install", "{pkg}"],
    "apt": ["sudo", "apt-get", "install", "-y", "{pkg}"],
    "apt-get": ["sudo", "apt-get", "install", "-y", "{pkg}"],
    "dnf": ["sudo", "dnf", "install", "-y", "{pkg}"],
    "yum": ["sudo", "yum", "install", "-y", "{pkg}"],
    "pacman": ["sudo", "pacman", "-S", "--noconfirm", "{pkg}"],
    "snap": ["sudo", "snap", "install", "{pkg}"],
    "flatpak": ["flatpak", "install", "-y", "{pkg}"],
    "nix": ["nix-env", "-iA", "{pkg}"],
}

# Side-effect free commands that exit zero when the package is installed.
CHECK_COMMANDS: dict[str, list[str]] = {
    "brew": ["brew", "list", "--formula", "{pkg}"],
    "brew-cask": ["brew", "list", "--cask", "{pkg}"],
    "winget": ["winget", "list", "--id", "{pkg}", "-e"],
    "choco": ["choco", "list", "--local-only", "{pkg}"],
    "scoop": ["scoop", "info", "{pkg}"],
    "apt": ["dpkg", "-s", "{pkg}"],
    "apt-get": ["dpkg", "-s", "{pkg}"],
    "dnf": ["rpm", "-q", "{pkg}"],
    "yum": ["rpm", "-q", "{pkg}"],
    "pacman": ["pacman", "-Q", "{pkg}"],
    "snap": ["snap", "list", "{pkg}"],
    "flatpak": ["flatpak", "info", "{pkg}"],
}


def _fill(template: list[str], package: str) -> list[str]:
    return [package if arg == "{pkg}" else arg for arg in template]


def install_args(manager: str, package: str) -> list[str]:
    """Return the command that installs ``package`` with ``manager``.

    Raises:
        ActionError: If the manager is unknown.
    """
    template = INSTALL_COMMANDS.get(manager)
    if template is None:
        msg = f'unknown package manager: "{manager}"'
        raise ActionError(msg)
    return _fill(template, package)


def check_args(manager: str, package: str) -> list[str] | None:
    """Return the command that checks for ``package``, or None if unsupported."""
    template = CHECK_COMMANDS.get(manager)
    if template is None:
        return None
    return _fill(template, package)


class PackageAction(Action, Idempotent):
    """Install a package via a package manager.

    Attributes:
        package: Package name or identifier.
        manager: Package manager, e.g. "brew", "apt", "winget".
    """

    def __init__(self, package: str, manager: str) -> None:
        self.package = package
        self.manager = manager

    def describe(self) -> str:
        return f'install package "{self.package}" via {self.manager}'

    def run(self, dry_run: bool = False) -> None:
        args = install_args(self.manager, self.package)
        if dry_run:
            self.print_dry_run()
            return
        check_call(args)

    def is_applied(self) -> bool:
        """Ask the package manager whether the package is installed.

        A missing or failing check command counts as "not installed" so the
        install still gets a chance to run.
        """
        args = check_args(self.manager, self.package)
        if args is None:
            return False
        try:
            result = run_command(args, timeout=None)
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Package check %s failed to run: %s", args[0], e)
            return False
        return result.success
