"""Todolist tools.

Works on markdown checklists (``- [ ] task`` / ``- [x] task``) produced by the
planning side of the workflow.
"""

import logging
import re
from pathlib import Path
from typing import Annotated

from pydantic import Field

from thought.exceptions import NotFoundError
from thought.tools.filesystem import WorkspaceRoot
from thought.tools.toolset import TOOL_ERRORS, WorkspaceToolset

logger = logging.getLogger(__name__)


def complete_task(content: str, task: str) -> tuple[str, int]:
    """Check off every unchecked item whose text starts with ``task``.

    The task text is matched literally after trimming surrounding whitespace.

    Returns:
        (updated content, number of items checked off)

    Example:
        >>> complete_task("- [ ] Write tests\\n- [ ] Ship", "Write tests")
        ('- [x] Write tests\\n- [ ] Ship', 1)
    """
    task = task.strip()
    pattern = re.compile(rf"- \[ \][ \t]*{re.escape(task)}", re.MULTILINE)
    return pattern.subn(lambda _: f"- [x] {task}", content)


class TodolistTools(WorkspaceToolset):
    """Tools that update todolist files in place."""

    def get_tools(self) -> list:
        return [self.mark_task_complete]

    async def mark_task_complete(
        self,
        task: Annotated[
            str, Field(description="The task to mark as complete (text of the task from the todolist)")
        ],
        todolist_file: Annotated[str, Field(description="Path to the todolist markdown file")],
        workspace_root: WorkspaceRoot,
        create_backup: Annotated[
            bool, Field(description="Whether to create a backup of the original file")
        ] = True,
    ) -> str:
        """Mark a specific task as complete in the todolist."""
        if not task.strip():
            return self._create_error_response("Task description cannot be empty.")
        if not todolist_file:
            return self._create_error_response("Todolist file path cannot be empty.")

        try:
            (resolved,) = self._resolve(workspace_root, todolist_file)
            if not Path(resolved).is_file():
                raise NotFoundError(resolved, f'Todolist file "{resolved}" does not exist.')

            original = self.engine.read_file(resolved)
            if create_backup:
                self.engine.write_backup(resolved)

            updated, count = complete_task(original, task)
            if count == 0:
                return f'No changes made: Could not find unchecked task "{task}" in the todolist.'

            self.engine.create_file(resolved, updated, overwrite=True)
        except TOOL_ERRORS as e:
            return self._handle_error("mark task as complete", e)

        logger.info(f"Marked {count} item(s) complete in {resolved}")
        self.context.record_target(todolist_file, resolved)
        return self._create_success_response(
            f'Successfully marked task "{task}" as complete in "{resolved}".'
        )
