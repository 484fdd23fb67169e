"""Project context tracking.

The server owns one :class:`ProjectContext` and hands it to every toolset.
Successful tool calls record the project they touched; the record is
informational and never consulted for correctness.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from thought.workspace.paths import path_module

logger = logging.getLogger(__name__)

PACKAGE_DIR = str(Path(__file__).resolve().parent)


@dataclass
class ProjectEntry:
    name: str
    path: str
    metadata: dict[str, Any] = field(default_factory=dict)


class ProjectContext:
    """Registry of known projects plus a current-project pointer.

    Example:
        >>> context = ProjectContext()
        >>> context.set_current_project("api", "/home/me/api").name
        'api'
        >>> context.get_current_project().path
        '/home/me/api'
    """

    def __init__(self, tool_directories: list[str] | None = None):
        self._lock = threading.Lock()
        self._projects: dict[str, ProjectEntry] = {}
        self._current: str | None = None
        self._tool_directories: list[str] = [PACKAGE_DIR]
        for directory in tool_directories or []:
            self.add_tool_directory(directory)

    def set_current_project(
        self, name: str, path: str, metadata: dict[str, Any] | None = None
    ) -> ProjectEntry:
        """Register (or replace) a project and make it current."""
        entry_metadata = dict(metadata or {})
        entry_metadata["last_active"] = datetime.now(timezone.utc).isoformat()
        entry = ProjectEntry(name=name, path=path, metadata=entry_metadata)

        with self._lock:
            self._projects[name] = entry
            self._current = name

        logger.debug(f"Current project set: {name} ({path})")
        return entry

    def get_current_project(self) -> ProjectEntry | None:
        with self._lock:
            if self._current is None:
                return None
            return self._projects.get(self._current)

    def get_projects(self) -> dict[str, ProjectEntry]:
        with self._lock:
            return dict(self._projects)

    def add_tool_directory(self, path: str) -> None:
        normalized = path_module(path).normpath(path)
        with self._lock:
            if normalized not in self._tool_directories:
                self._tool_directories.append(normalized)

    def is_tool_directory(self, path: str) -> bool:
        """Return True if ``path`` is, or lies inside, a registered tool directory."""
        mod = path_module(path)
        normalized = mod.normpath(path)
        with self._lock:
            directories = list(self._tool_directories)
        return any(
            normalized == directory or normalized.startswith(directory + mod.sep)
            for directory in directories
        )

    def record_target(self, target: str, resolved: str, is_directory: bool = False) -> ProjectEntry:
        """Record the project touched by an operation on ``target``.

        The project name is the target's final component (extension stripped for
        files); the project path is the directory containing the resolved target.
        """
        mod = path_module(resolved)
        base = mod.basename(mod.normpath(target))
        name = base if is_directory else mod.splitext(base)[0]
        return self.set_current_project(name, mod.dirname(resolved))
