"""Fixtures for CLI tests."""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """System-side directory that file items are pushed into."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def dotfiles_config(write_config: Callable[[str], Path], home: Path) -> Path:
    """A repo with a zshrc module and a module tagged for work machines."""
    config_path = write_config(
        f"""
[[modules]]
name = "shell"

[[modules.items]]
file = "zsh/.zshrc"
destination = "{home}/"
verify = "test -f {home}/.zshrc"

[[modules.items]]
run = "true"

[[modules]]
name = "work"
only = ["work-laptop"]

[[modules.items]]
run = "touch {home}/work-marker"
"""
    )
    zsh = config_path.parent / "zsh"
    zsh.mkdir()
    (zsh / ".zshrc").write_text("export EDITOR=vim\n")
    return config_path


@pytest.fixture
def failing_config(write_config: Callable[[str], Path], home: Path) -> Path:
    """A module that writes a file and then fails."""
    config_path = write_config(
        f"""
[[modules]]
name = "broken"

[[modules.items]]
file = "app.conf"
destination = "{home}/"

[[modules.items]]
run = "false"
"""
    )
    (config_path.parent / "app.conf").write_text("new")
    return config_path
