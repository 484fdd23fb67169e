"""Pydantic models for thought configuration schema."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from thought.config.constants import (
    DEFAULT_BACKUP_SUFFIX,
    DEFAULT_DATA_DIR,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_SERVER_NAME,
    DEFAULT_TRANSPORT,
)

# Module-level constants for validation
VALID_TRANSPORTS = {"stdio", "sse", "streamable-http"}
VALID_LOG_LEVELS = {"trace", "debug", "info", "warning", "error", "critical"}


class ServerConfig(BaseModel):
    """MCP server configuration."""

    name: str = DEFAULT_SERVER_NAME
    transport: str = DEFAULT_TRANSPORT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    data_dir: str = str(DEFAULT_DATA_DIR)

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        """Validate transport name."""
        if v not in VALID_TRANSPORTS:
            raise ValueError(f"Invalid transport: {v}. Valid transports: {VALID_TRANSPORTS}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        level = v.lower()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {VALID_LOG_LEVELS}")
        return level

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: str) -> str:
        """Expand user home directory in data_dir."""
        return str(Path(v).expanduser())


class WorkspaceConfig(BaseModel):
    """Workspace path resolution and backup configuration."""

    allow_escape_workspace: bool = Field(
        default=True,
        description="Allow absolute target paths outside workspace_root to be used verbatim. "
        "When false, such paths are rejected.",
    )
    backup_suffix: str = Field(
        default=DEFAULT_BACKUP_SUFFIX,
        description="Suffix appended to a file path to form its backup sibling",
    )

    @field_validator("backup_suffix")
    @classmethod
    def validate_backup_suffix(cls, v: str) -> str:
        """Backup suffix must be non-empty so the backup never aliases the original."""
        if not v:
            raise ValueError("backup_suffix cannot be empty")
        return v


class ProjectConfig(BaseModel):
    """Project context tracking configuration."""

    tool_directories: list[str] = Field(
        default_factory=list,
        description="Extra directories treated as the tool's own installation",
    )

    @field_validator("tool_directories")
    @classmethod
    def expand_tool_directories(cls, v: list[str]) -> list[str]:
        """Expand user home directory in tool directories."""
        return [str(Path(p).expanduser()) for p in v]


class ThoughtSettings(BaseModel):
    """Root configuration model for thought settings."""

    version: str = "1.0"
    server: ServerConfig = Field(default_factory=ServerConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)

    @property
    def data_dir(self) -> Path:
        """Data directory as a Path."""
        return Path(self.server.data_dir)

    def model_dump_json_minimal(self) -> str:
        """Dump model to minimal JSON string.

        Drops empty lists so a fresh settings file only shows values a user
        would plausibly edit.

        Returns:
            JSON string with minimal configuration
        """
        data = self.model_dump(exclude_none=True)
        if not data["project"]["tool_directories"]:
            del data["project"]
        return json.dumps(data, indent=2)

    @classmethod
    def get_json_schema(cls) -> dict[str, Any]:
        """Get JSON schema for the settings model."""
        return cls.model_json_schema()
