"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state dirs into tmp_path for every test."""
    home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / "state"))
    return home


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Factory that writes a dotular.toml into tmp_path/repo."""

    def _write(content: str) -> Path:
        repo = tmp_path / "repo"
        repo.mkdir(exist_ok=True)
        path = repo / "dotular.toml"
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def sample_config_toml() -> str:
    """Config with a cross-platform module, a tagged module and a brew package."""
    return """
[[modules]]
name = "shell"

[[modules.items]]
run = "echo hello"

[[modules.items]]
file = "zsh/.zshrc"
destination = "~/"

[[modules]]
name = "work"
only = ["work-laptop"]

[[modules.items]]
run = "echo work"

[[modules]]
name = "homebrew"

[[modules.items]]
package = "git"
via = "brew"
"""
