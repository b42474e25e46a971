"""Config file I/O operations.

This module provides loading of dotular.toml files with validation using
the Pydantic models in :mod:`dotular.models.config`.
"""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from dotular.core.paths import get_default_config_path
from dotular.models.config import Config


class ConfigError(Exception):
    """Base exception for config-related errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the config content is invalid."""


def load_config(path: Path | None = None) -> Config:
    """Load and validate a config from a TOML file.

    An empty file is a valid config with no modules.

    Args:
        path: Path to the config file. If None, uses ./dotular.toml.

    Returns:
        Validated Config object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_default_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e


def config_root(path: Path | None = None) -> Path:
    """Directory that relative item sources are resolved against.

    Args:
        path: Path to the config file. If None, uses ./dotular.toml.

    Returns:
        Absolute directory containing the config file.
    """
    config_path = path or get_default_config_path()
    return config_path.resolve().parent
