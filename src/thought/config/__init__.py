"""Configuration package for thought."""

from .manager import (
    ConfigurationError,
    get_config_path,
    get_env_overrides,
    load_config,
    merge_with_env,
    save_config,
)
from .schema import ProjectConfig, ServerConfig, ThoughtSettings, WorkspaceConfig

__all__ = [
    # Schema
    "ThoughtSettings",
    "ServerConfig",
    "WorkspaceConfig",
    "ProjectConfig",
    # Manager
    "ConfigurationError",
    "get_config_path",
    "get_env_overrides",
    "load_config",
    "save_config",
    "merge_with_env",
]
