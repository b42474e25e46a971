"""Unit tests for config loading."""

from collections.abc import Callable
from pathlib import Path

import pytest
from dotular.core.config import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    config_root,
    load_config,
)
from dotular.models.config import FileItem, PackageItem


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_modules(
        self, write_config: Callable[[str], Path], sample_config_toml: str
    ) -> None:
        """A valid file yields validated modules in order."""
        config = load_config(write_config(sample_config_toml))

        assert [m.name for m in config.modules] == ["shell", "work", "homebrew"]
        assert isinstance(config.modules[0].items[1], FileItem)
        assert config.module("work").only_tags == ["work-laptop"]
        assert isinstance(config.module("homebrew").items[0], PackageItem)

    def test_empty_file(self, write_config: Callable[[str], Path]) -> None:
        """An empty file is a config without modules."""
        assert load_config(write_config("")).modules == []

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_default_path_is_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without a path, ./dotular.toml is used."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "dotular.toml").write_text('[[modules]]\nname = "a"\n')

        assert load_config().modules[0].name == "a"

    def test_invalid_toml(self, write_config: Callable[[str], Path]) -> None:
        """TOML syntax errors raise ConfigParseError."""
        with pytest.raises(ConfigParseError):
            load_config(write_config("[[modules]\nname = "))

    def test_invalid_item(self, write_config: Callable[[str], Path]) -> None:
        """Items without a primary field raise ConfigValidationError."""
        content = '[[modules]]\nname = "m"\n\n[[modules.items]]\nvia = "brew"\n'

        with pytest.raises(ConfigValidationError, match="exactly one of"):
            load_config(write_config(content))

    def test_per_os_destination(self, write_config: Callable[[str], Path]) -> None:
        """Destinations can be given per OS."""
        content = """
[[modules]]
name = "m"

[[modules.items]]
file = "settings.json"

[modules.items.destination]
macos = "~/Library/Application Support/Code/User"
linux = "~/.config/Code/User"
"""
        item = load_config(write_config(content)).modules[0].items[0]

        assert item.destination.for_os("linux") == "~/.config/Code/User"
        assert item.destination.for_os("windows") is None


class TestConfigRoot:
    """Tests for config_root."""

    def test_parent_of_config(self, tmp_path: Path) -> None:
        """Sources resolve against the config's directory."""
        assert config_root(tmp_path / "repo" / "dotular.toml") == (tmp_path / "repo").resolve()
