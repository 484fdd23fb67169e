"""Configuration constants for thought.

This module provides a single source of truth for all default configuration values.
Separated from schema.py and manager.py to avoid circular imports.
"""

from pathlib import Path

# Default paths
DEFAULT_DATA_DIR = Path.home() / ".thought"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "settings.json"

# Default server settings
DEFAULT_SERVER_NAME = "thought"
DEFAULT_TRANSPORT = "stdio"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "info"

# Default workspace settings
DEFAULT_BACKUP_SUFFIX = ".bak"
