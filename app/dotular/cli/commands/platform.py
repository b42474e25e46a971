"""Platform command implementation."""

from dotular.core.platform import current_arch, current_os
from dotular.utils.formatting import console


def platform() -> None:
    """Print the detected platform (OS)."""
    console.print(f"os: {current_os()}")
    console.print(f"arch: {current_arch()}", style="muted")
