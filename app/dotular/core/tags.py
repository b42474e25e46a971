"""Machine tags used to gate module application.

Tags live in ~/.config/dotular/machine.toml::

    tags = ["darwin", "arm64", "work-laptop"]

Modules opt in with ``only_tags`` and opt out with ``exclude_tags``.
"""

import logging
import socket
import tomllib
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dotular.core.paths import get_machine_config_path
from dotular.core.platform import current_arch, current_os

logger = logging.getLogger(__name__)


class TagsError(Exception):
    """Raised when the machine config cannot be read or written."""


class MachineConfig(BaseModel):
    """Schema of machine.toml."""

    model_config = ConfigDict(extra="forbid")

    tags: Annotated[list[str], Field(default_factory=list, description="Machine tags")]


def matches(machine_tags: list[str], only: list[str], exclude: list[str]) -> bool:
    """Check a module's tag filters against this machine's tags.

    - If any ``exclude`` tag is present, the module does not match.
    - If ``only`` is empty, the module matches.
    - Otherwise at least one ``only`` tag must be present.
    """
    present = set(machine_tags)
    if any(tag in present for tag in exclude):
        return False
    if not only:
        return True
    return any(tag in present for tag in only)


def load_machine_config(path: Path | None = None) -> MachineConfig:
    """Read the machine config, returning an empty config if the file is missing.

    Raises:
        TagsError: If the file exists but cannot be read or parsed.
    """
    config_path = path or get_machine_config_path()
    if not config_path.exists():
        return MachineConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return MachineConfig.model_validate(data)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        raise TagsError(f"Failed to read machine config {config_path}: {e}") from e


def save_machine_config(config: MachineConfig, path: Path | None = None) -> Path:
    """Write the machine config, creating parent directories.

    Raises:
        TagsError: If the file cannot be written.
    """
    config_path = path or get_machine_config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "wb") as f:
            tomli_w.dump(config.model_dump(), f)
    except OSError as e:
        raise TagsError(f"Failed to write machine config {config_path}: {e}") from e
    return config_path


def auto_detect() -> list[str]:
    """Baseline tags for this machine: OS, architecture and hostname."""
    tags = [current_os(), current_arch()]
    hostname = socket.gethostname()
    if hostname:
        tags.append(hostname)
    return tags


def ensure_initialised(path: Path | None = None) -> None:
    """Write a machine config with auto-detected tags if none exists."""
    config_path = path or get_machine_config_path()
    if config_path.exists():
        return
    save_machine_config(MachineConfig(tags=auto_detect()), config_path)
    logger.debug("Initialised machine config at %s", config_path)


def add_tag(tag: str, path: Path | None = None) -> bool:
    """Add ``tag`` to the machine config.

    Returns:
        True if the tag was added, False if it was already present.
    """
    config = load_machine_config(path)
    if tag in config.tags:
        return False
    config.tags.append(tag)
    save_machine_config(config, path)
    return True


def load_machine_tags(path: Path | None = None) -> list[str]:
    """Tags for this machine; an unreadable config yields no tags."""
    try:
        return load_machine_config(path).tags
    except TagsError as e:
        logger.warning("Ignoring machine tags: %s", e)
        return []
