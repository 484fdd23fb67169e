"""Configuration file manager for loading, saving, and managing thought settings."""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from .constants import DEFAULT_CONFIG_PATH
from .schema import ThoughtSettings


class ConfigurationError(Exception):
    """Raised when configuration operations fail."""

    pass


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Returns:
        Path to ~/.thought/settings.json
    """
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> ThoughtSettings:
    """Load configuration from JSON file.

    Args:
        config_path: Optional path to config file. Defaults to ~/.thought/settings.json

    Returns:
        ThoughtSettings instance loaded from file, or default settings if file doesn't exist

    Raises:
        ConfigurationError: If file exists but is invalid JSON or fails validation

    Example:
        >>> settings = load_config()
        >>> settings.server.transport
        'stdio'
    """
    if config_path is None:
        config_path = get_config_path()

    # Return defaults if file doesn't exist
    if not config_path.exists():
        return ThoughtSettings()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)

        return ThoughtSettings(**data)

    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed for {config_path}:\n{e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}") from e


def save_config(settings: ThoughtSettings, config_path: Path | None = None) -> None:
    """Save configuration to JSON file with minimal formatting.

    Sets restrictive permissions (0o600) on POSIX systems.

    Args:
        settings: ThoughtSettings instance to save
        config_path: Optional path to config file. Defaults to ~/.thought/settings.json

    Raises:
        ConfigurationError: If save operation fails
    """
    if config_path is None:
        config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(settings.model_dump_json_minimal())

        if os.name != "nt":
            os.chmod(config_path, 0o600)

    except OSError as e:
        raise ConfigurationError(f"Failed to save configuration to {config_path}: {e}") from e


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_env_overrides() -> dict[str, Any]:
    """Collect environment variable overrides.

    A ``.env`` file in the current directory is loaded first; variables already
    present in the process environment win over it.

    Returns:
        Nested dictionary of overrides shaped like ThoughtSettings
    """
    load_dotenv(find_dotenv(usecwd=True))

    env_overrides: dict[str, Any] = {}

    if os.getenv("THOUGHT_LOG_LEVEL"):
        env_overrides.setdefault("server", {})["log_level"] = os.getenv("THOUGHT_LOG_LEVEL")
    if os.getenv("THOUGHT_TRANSPORT"):
        env_overrides.setdefault("server", {})["transport"] = os.getenv("THOUGHT_TRANSPORT")
    if os.getenv("THOUGHT_HOST"):
        env_overrides.setdefault("server", {})["host"] = os.getenv("THOUGHT_HOST")
    if os.getenv("THOUGHT_PORT"):
        try:
            env_overrides.setdefault("server", {})["port"] = int(os.getenv("THOUGHT_PORT", ""))
        except ValueError as e:
            raise ConfigurationError(
                f"THOUGHT_PORT must be an integer, got: {os.getenv('THOUGHT_PORT')}"
            ) from e
    if os.getenv("THOUGHT_DATA_DIR"):
        env_overrides.setdefault("server", {})["data_dir"] = os.getenv("THOUGHT_DATA_DIR")

    if os.getenv("THOUGHT_ALLOW_ESCAPE_WORKSPACE"):
        env_overrides.setdefault("workspace", {})["allow_escape_workspace"] = _env_flag(
            os.getenv("THOUGHT_ALLOW_ESCAPE_WORKSPACE", "")
        )

    return env_overrides


def merge_with_env(settings: ThoughtSettings) -> ThoughtSettings:
    """Merge configuration file settings with environment variable overrides.

    Environment variables take precedence over file settings.

    Args:
        settings: ThoughtSettings instance from file

    Returns:
        New ThoughtSettings with overrides applied

    Raises:
        ConfigurationError: If an override fails validation

    Example:
        >>> settings = merge_with_env(load_config())
    """
    overrides = get_env_overrides()
    if not overrides:
        return settings

    merged = deep_merge(settings.model_dump(), overrides)
    try:
        return ThoughtSettings(**merged)
    except ValidationError as e:
        raise ConfigurationError(f"Environment override validation failed:\n{e}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary
        override: Override dictionary (takes precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
