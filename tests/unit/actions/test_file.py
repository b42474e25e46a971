"""Unit tests for the file action."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from dotular.actions.base import ActionError
from dotular.actions.file import FileAction, parse_mode
from dotular.models.config import Direction


@pytest.fixture
def repo_file(tmp_path: Path) -> Path:
    """A repo-side .vimrc."""
    repo = tmp_path / "repo"
    repo.mkdir()
    path = repo / ".vimrc"
    path.write_text("repo")
    return path


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty system-side home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


class TestResolvedTarget:
    """Tests for destination resolution."""

    def test_directory_destination_appends_basename(self, repo_file: Path, home: Path) -> None:
        """A directory destination receives the source basename."""
        action = FileAction(repo_file, f"{home}/")

        assert action.resolved_target() == home / ".vimrc"

    def test_destination_with_extension_is_full_path(self, repo_file: Path, home: Path) -> None:
        """A destination whose name contains a dot is the file itself."""
        action = FileAction(repo_file, f"{home}/.wezterm.lua")

        assert action.resolved_target() == home / ".wezterm.lua"

    def test_destination_without_dot_is_directory(self, repo_file: Path, home: Path) -> None:
        """A bare name without a dot or trailing slash is a directory."""
        action = FileAction(repo_file, f"{home}/vim")

        assert action.resolved_target() == home / "vim" / ".vimrc"

    def test_expands_home(
        self, repo_file: Path, home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """~ is expanded."""
        monkeypatch.setenv("HOME", str(home))

        assert FileAction(repo_file, "~/").resolved_target() == home / ".vimrc"


class TestDescribe:
    """Tests for describe()."""

    @pytest.mark.parametrize(
        ("direction", "link", "prefix", "arrow"),
        [
            (Direction.PUSH, False, "push", "->"),
            (Direction.PULL, False, "pull", "<-"),
            (Direction.SYNC, False, "sync", "<->"),
            (Direction.SYNC, True, "link", "->"),
        ],
    )
    def test_formats(
        self,
        repo_file: Path,
        home: Path,
        direction: Direction,
        link: bool,
        prefix: str,
        arrow: str,
    ) -> None:
        """Descriptions show the operation and direction."""
        action = FileAction(repo_file, f"{home}/", direction=direction, link=link)

        assert action.describe() == f"{prefix}   {repo_file} {arrow} {home / '.vimrc'}"


class TestRun:
    """Tests for running file actions."""

    def test_push_copies(self, repo_file: Path, home: Path) -> None:
        """push copies the repo file to the system."""
        FileAction(repo_file, f"{home}/").run()

        assert (home / ".vimrc").read_text() == "repo"

    def test_push_missing_source(self, tmp_path: Path, home: Path) -> None:
        """push fails when the repo file is missing."""
        with pytest.raises(ActionError, match="repo file does not exist"):
            FileAction(tmp_path / "missing", f"{home}/").run()

    def test_push_replaces_symlink_without_writing_through(
        self, repo_file: Path, home: Path, tmp_path: Path
    ) -> None:
        """A symlinked destination is replaced, leaving its target alone."""
        other = tmp_path / "other"
        other.write_text("other")
        (home / ".vimrc").symlink_to(other)

        FileAction(repo_file, f"{home}/").run()

        assert not (home / ".vimrc").is_symlink()
        assert (home / ".vimrc").read_text() == "repo"
        assert other.read_text() == "other"

    def test_pull_copies_back(self, repo_file: Path, home: Path) -> None:
        """pull copies the system file into the repo."""
        (home / ".vimrc").write_text("system")

        FileAction(repo_file, f"{home}/", direction=Direction.PULL).run()

        assert repo_file.read_text() == "system"

    def test_pull_missing_system_file(self, repo_file: Path, home: Path) -> None:
        """pull fails when the system file is missing."""
        with pytest.raises(ActionError, match="system file does not exist"):
            FileAction(repo_file, f"{home}/", direction=Direction.PULL).run()

    def test_dry_run_does_nothing(self, repo_file: Path, home: Path) -> None:
        """Dry-run leaves the destination untouched."""
        FileAction(repo_file, f"{home}/").run(dry_run=True)

        assert not (home / ".vimrc").exists()

    def test_link(self, repo_file: Path, home: Path) -> None:
        """link creates an absolute symlink and is then applied."""
        action = FileAction(repo_file, f"{home}/", link=True)
        assert not action.is_applied()

        action.run()

        assert os.readlink(home / ".vimrc") == str(repo_file.absolute())
        assert action.is_applied()

    def test_link_replaces_existing_file(self, repo_file: Path, home: Path) -> None:
        """An existing file is replaced by the link."""
        (home / ".vimrc").write_text("old")

        FileAction(repo_file, f"{home}/", link=True).run()

        assert (home / ".vimrc").is_symlink()

    def test_copy_is_never_applied(self, repo_file: Path, home: Path) -> None:
        """Only link actions report applied."""
        (home / ".vimrc").write_text("repo")

        assert not FileAction(repo_file, f"{home}/").is_applied()

    def test_permissions_enforced(self, repo_file: Path, home: Path) -> None:
        """Permissions are applied after the copy."""
        FileAction(repo_file, f"{home}/", permissions="0600").run()

        assert (home / ".vimrc").stat().st_mode & 0o777 == 0o600


class TestSync:
    """Tests for sync direction."""

    def test_missing_system_copy_pushed(self, repo_file: Path, home: Path) -> None:
        """sync pushes when only the repo copy exists."""
        FileAction(repo_file, f"{home}/", direction=Direction.SYNC).run()

        assert (home / ".vimrc").read_text() == "repo"

    def test_missing_repo_copy_pulled(self, tmp_path: Path, home: Path) -> None:
        """sync pulls when only the system copy exists."""
        source = tmp_path / "repo" / ".vimrc"
        (home / ".vimrc").write_text("system")

        FileAction(source, f"{home}/", direction=Direction.SYNC).run()

        assert source.read_text() == "system"

    def test_neither_exists(self, tmp_path: Path, home: Path) -> None:
        """sync fails when both copies are missing."""
        with pytest.raises(ActionError, match="neither"):
            FileAction(tmp_path / ".vimrc", f"{home}/", direction=Direction.SYNC).run()

    def test_equal_files_not_prompted(self, repo_file: Path, home: Path) -> None:
        """Identical copies need no decision."""
        (home / ".vimrc").write_text("repo")

        with patch("dotular.actions.file.ask_conflict") as mock_ask:
            FileAction(repo_file, f"{home}/", direction=Direction.SYNC).run()

        mock_ask.assert_not_called()

    @pytest.mark.parametrize(
        ("choice", "repo_text", "system_text"),
        [("1", "repo", "repo"), ("2", "system", "system"), ("s", "repo", "system")],
    )
    def test_conflict_choices(
        self, repo_file: Path, home: Path, choice: str, repo_text: str, system_text: str
    ) -> None:
        """The conflict answer decides which side wins."""
        (home / ".vimrc").write_text("system")

        with patch("dotular.actions.file.ask_conflict", return_value=choice):
            FileAction(repo_file, f"{home}/", direction=Direction.SYNC).run()

        assert repo_file.read_text() == repo_text
        assert (home / ".vimrc").read_text() == system_text


class TestPermissions:
    """Tests for permission helpers."""

    def test_parse_mode(self) -> None:
        """Octal strings are parsed."""
        assert parse_mode("0644") == 0o644

    def test_parse_mode_invalid(self) -> None:
        """Non-octal strings raise ActionError."""
        with pytest.raises(ActionError):
            parse_mode("rw")

    def test_status_reports_mismatch(self, repo_file: Path, home: Path) -> None:
        """permissions_status reports the wanted and actual modes."""
        target = home / ".vimrc"
        target.write_text("x")
        target.chmod(0o644)

        status = FileAction(repo_file, f"{home}/", permissions="0600").permissions_status()

        assert status == "[permissions: want 0600, got 0644]"
