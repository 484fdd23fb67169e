"""Batch operations tool."""

import json
import logging
from typing import Annotated

from pydantic import Field

from thought.config import ThoughtSettings
from thought.context import ProjectContext
from thought.tools.filesystem import WorkspaceRoot
from thought.tools.toolset import TOOL_ERRORS, WorkspaceToolset
from thought.workspace.batch import BatchExecutor

logger = logging.getLogger(__name__)


class BatchTools(WorkspaceToolset):
    """Runs several file operations from one JSON payload.

    Example:
        >>> tools = BatchTools(ThoughtSettings())
        >>> ops = '[{"type": "create_directory", "path": "docs"}]'
        >>> await tools.batch_operations(ops, workspace_root="/home/me/project", dry_run=True)
        'Dry run: 1 operations validated successfully. ...'
    """

    def __init__(self, settings: ThoughtSettings, context: ProjectContext | None = None):
        super().__init__(settings, context)
        self.executor = BatchExecutor(self.engine, self.resolver, self.context)

    def get_tools(self) -> list:
        return [self.batch_operations]

    async def batch_operations(
        self,
        operations: Annotated[
            str,
            Field(
                description="JSON array of operations to execute. Each operation should have a "
                "type (create_file, edit_file, delete_file, move_file, copy_file, "
                "create_directory, delete_directory) and operation-specific parameters."
            ),
        ],
        workspace_root: WorkspaceRoot,
        dry_run: Annotated[
            bool, Field(description="Validate and describe operations without executing them")
        ] = False,
        continue_on_error: Annotated[
            bool, Field(description="Continue with the next operation when one fails")
        ] = False,
    ) -> str:
        """Execute multiple file operations in a batch.

        All operations are validated before any runs. Execution is sequential
        and not transactional: operations completed before a failure stay done.
        """
        try:
            parsed = json.loads(operations)
        except json.JSONDecodeError as e:
            return self._create_error_response(f"Failed to parse operations JSON - {e}")
        if not isinstance(parsed, list):
            return self._create_error_response("Operations must be a JSON array.")

        try:
            report = self.executor.run(
                parsed, workspace_root, dry_run=dry_run, continue_on_error=continue_on_error
            )
        except TOOL_ERRORS as e:
            return self._handle_error("execute batch operations", e)

        if report.dry_run:
            return report.render()
        return self._create_success_response(report.render())
