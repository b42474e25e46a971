"""XDG-compliant path management for dotular.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/dotular/
- State: ~/.local/state/dotular/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "dotular"

# Default config file name, looked up in the current directory
DEFAULT_CONFIG_FILENAME = "dotular.toml"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/dotular/ (or XDG_CONFIG_HOME/dotular/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the audit log, which should persist between runs
    but is not configuration.

    Returns:
        Path to ~/.local/state/dotular/ (or XDG_STATE_HOME/dotular/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_default_config_path() -> Path:
    """Get the default module config file path.

    Returns:
        Path to ./dotular.toml in the current working directory.
    """
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def get_machine_config_path() -> Path:
    """Get the machine config file path (machine tags).

    Returns:
        Path to ~/.config/dotular/machine.toml.
    """
    return get_config_dir() / "machine.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/dotular/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_audit_log_path() -> Path:
    """Get the audit log file path.

    Returns:
        Path to ~/.local/state/dotular/audit.jsonl.
    """
    return get_state_dir() / "audit.jsonl"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Returns:
        Path to the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
