"""Server session helpers for the CLI."""

import logging
import os
from pathlib import Path

from thought.config.schema import ThoughtSettings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(settings: ThoughtSettings) -> int:
    """Numeric log level from THOUGHT_LOG_LEVEL, then settings, then INFO.

    ``trace`` maps to DEBUG.
    """
    level_name = (os.getenv("THOUGHT_LOG_LEVEL") or settings.server.log_level or "info").upper()
    if level_name == "TRACE":
        level_name = "DEBUG"
    return getattr(logging, level_name, logging.INFO)


def setup_logging(settings: ThoughtSettings, log_file: str | Path | None = None) -> str:
    """Setup server logging to file (not console).

    stdout carries the MCP stdio stream, so nothing may be logged there.

    Args:
        settings: Effective settings (data_dir and log_level)
        log_file: Override for the default ``<data_dir>/logs/server.log``

    Returns:
        Path to log file as string

    Example:
        >>> setup_logging(ThoughtSettings())
        '/Users/user/.thought/logs/server.log'
    """
    if log_file is None:
        log_dir = settings.data_dir / "logs"
        log_file = log_dir / "server.log"
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=resolve_log_level(settings),
        format=LOG_FORMAT,
        filename=str(log_file),
        filemode="a",
        force=True,
    )

    logger.info(f"Logging to {log_file}")
    return str(log_file)
