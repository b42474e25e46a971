"""Unit tests for machine tags."""

from pathlib import Path
from unittest.mock import patch

import pytest
from dotular.core.tags import (
    MachineConfig,
    TagsError,
    add_tag,
    auto_detect,
    ensure_initialised,
    load_machine_config,
    load_machine_tags,
    matches,
    save_machine_config,
)


@pytest.fixture
def machine_path(tmp_path: Path) -> Path:
    """Location of a machine.toml inside tmp_path."""
    return tmp_path / "dotular" / "machine.toml"


class TestMatches:
    """Tests for the tag matching rule."""

    def test_no_filters_matches(self) -> None:
        """A module without filters applies everywhere."""
        assert matches(["linux"], [], [])

    def test_only_requires_one_tag(self) -> None:
        """At least one only-tag must be present."""
        assert matches(["linux", "laptop"], ["desktop", "laptop"], [])
        assert not matches(["linux"], ["laptop"], [])

    def test_exclude_wins(self) -> None:
        """An exclude tag vetoes even a matching only-tag."""
        assert not matches(["laptop", "work"], ["laptop"], ["work"])

    def test_exclude_absent(self) -> None:
        """Exclude tags that are not present do not block."""
        assert matches(["linux"], [], ["windows"])

    def test_no_machine_tags(self) -> None:
        """A machine without tags only matches unfiltered modules."""
        assert not matches([], ["laptop"], [])


class TestMachineConfig:
    """Tests for reading and writing machine.toml."""

    def test_missing_file_is_empty(self, machine_path: Path) -> None:
        """No file means no tags."""
        assert load_machine_config(machine_path).tags == []

    def test_save_and_load(self, machine_path: Path) -> None:
        """Saved tags are written as TOML and read back."""
        save_machine_config(MachineConfig(tags=["linux", "work"]), machine_path)

        assert machine_path.read_text().startswith("tags = ")
        assert load_machine_config(machine_path).tags == ["linux", "work"]

    def test_invalid_toml_raises(self, machine_path: Path) -> None:
        """Broken TOML surfaces as TagsError."""
        machine_path.parent.mkdir(parents=True)
        machine_path.write_text("tags = [")

        with pytest.raises(TagsError):
            load_machine_config(machine_path)

    def test_unknown_key_raises(self, machine_path: Path) -> None:
        """Unknown keys are rejected."""
        machine_path.parent.mkdir(parents=True)
        machine_path.write_text('hostname = "x"\n')

        with pytest.raises(TagsError):
            load_machine_config(machine_path)

    def test_load_machine_tags_tolerates_errors(self, machine_path: Path) -> None:
        """An unreadable config yields no tags instead of an error."""
        machine_path.parent.mkdir(parents=True)
        machine_path.write_text("tags = 5")

        assert load_machine_tags(machine_path) == []


class TestInitialisation:
    """Tests for auto-detection and tag management."""

    @patch("dotular.core.tags.socket.gethostname", return_value="box")
    @patch("dotular.core.tags.current_arch", return_value="arm64")
    @patch("dotular.core.tags.current_os", return_value="darwin")
    def test_auto_detect(self, *_mocks: object) -> None:
        """Baseline tags are os, arch and hostname."""
        assert auto_detect() == ["darwin", "arm64", "box"]

    @patch("dotular.core.tags.socket.gethostname", return_value="")
    def test_auto_detect_without_hostname(self, _mock: object) -> None:
        """An empty hostname is left out."""
        assert len(auto_detect()) == 2

    @patch("dotular.core.tags.auto_detect", return_value=["linux", "x86_64"])
    def test_ensure_initialised_writes_once(self, _mock: object, machine_path: Path) -> None:
        """The first call writes detected tags; later calls keep the file."""
        ensure_initialised(machine_path)
        save_machine_config(MachineConfig(tags=["custom"]), machine_path)

        ensure_initialised(machine_path)

        assert load_machine_config(machine_path).tags == ["custom"]

    def test_add_tag(self, machine_path: Path) -> None:
        """add_tag appends new tags and ignores duplicates."""
        assert add_tag("work", machine_path) is True
        assert add_tag("work", machine_path) is False
        assert load_machine_config(machine_path).tags == ["work"]
