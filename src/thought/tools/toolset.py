"""Base class for thought toolsets.

This module provides the abstract base class for creating toolsets. Toolsets
encapsulate related tools with shared dependencies (settings, the project
context, the path resolver and the file operation engine), avoiding global
state and enabling dependency injection for testing.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from thought.config import ThoughtSettings
from thought.context import ProjectContext
from thought.exceptions import InvalidWorkspaceRootError, ThoughtError
from thought.utils.responses import create_error_response, create_success_response
from thought.workspace.engine import FileOperationEngine
from thought.workspace.guard import ensure_not_critical
from thought.workspace.paths import PathResolver

logger = logging.getLogger(__name__)

# Failures a tool reports as "Error: ..." text instead of raising
TOOL_ERRORS = (ThoughtError, OSError, UnicodeError)


class WorkspaceToolset(ABC):
    """Base class for thought toolsets.

    Each toolset receives a ThoughtSettings instance and the server's shared
    ProjectContext, making both easy to replace in tests.

    Example:
        >>> class MyTools(WorkspaceToolset):
        ...     def get_tools(self):
        ...         return [self.touch]
        ...
        ...     async def touch(self, path: str, workspace_root: str) -> str:
        ...         (resolved,) = self._resolve(workspace_root, path)
        ...         return self._create_success_response(f"Touched {resolved}")
    """

    def __init__(self, settings: ThoughtSettings, context: ProjectContext | None = None):
        """Initialize toolset with settings and a project context.

        Args:
            settings: Server settings (workspace policy, backup suffix)
            context: Shared project context; a private one is created if omitted
        """
        self.settings = settings
        self.context = context or ProjectContext(settings.project.tool_directories)
        self.resolver = PathResolver(settings.workspace.allow_escape_workspace)
        self.engine = FileOperationEngine(backup_suffix=settings.workspace.backup_suffix)

    @abstractmethod
    def get_tools(self) -> list[Callable]:
        """Get list of tool functions.

        Tools are async callables whose parameters carry
        ``Annotated[..., Field(description=...)]`` metadata, which the MCP
        server turns into the tool's input schema.

        Returns:
            List of callable tool functions
        """
        pass

    def _resolve(self, workspace_root: str, *paths: str) -> list[str]:
        """Resolve paths, vetting both the raw and resolved forms against the denylist.

        Raises:
            CriticalPathDeniedError: A path matched the critical-path denylist
            InvalidWorkspaceRootError: workspace_root is missing, "." or relative
            PathOutsideWorkspaceError: A path escapes the workspace while escaping is disabled
        """
        ensure_not_critical(*paths)
        resolved = [self.resolver.resolve(workspace_root, path) for path in paths]
        ensure_not_critical(*resolved)
        return resolved

    def _backup_note(self, path: str) -> str:
        return f' A backup was created at "{self.engine.backup_path(path)}".'

    def _create_success_response(self, message: str) -> str:
        return create_success_response(message)

    def _create_error_response(self, message: str) -> str:
        return create_error_response(message)

    def _handle_error(self, action: str, error: Exception) -> str:
        """Turn an exception raised while running a tool into error text.

        Expected failures carry their own message; OS errors are prefixed with
        the action that failed.
        """
        if isinstance(error, InvalidWorkspaceRootError):
            logger.warning(f"Rejected call to {action}: {error}")
            return self._create_error_response(str(error))
        if isinstance(error, ThoughtError):
            logger.info(f"Failed to {action}: {error}")
            return self._create_error_response(str(error))

        logger.error(f"Failed to {action}: {error}")
        return self._create_error_response(f"Failed to {action} - {error}")
