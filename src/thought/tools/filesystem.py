"""Filesystem tools for workspace-scoped file operations.

This module exposes the file operation engine to MCP clients as eight tools:
create, edit, delete, move and copy for files, plus create, list and delete
for directories.

Key Features:
- Explicit workspace_root on every call, no current-directory fallback
- Critical-path denylist checked before any I/O
- Backup siblings before destructive edits, deletes and moves
- Dry-run previews for directory deletion

Every tool returns text: a success description followed by a workspace_root
reminder, or ``Error: <message>``.
"""

import logging
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field

from thought.exceptions import ConfirmationRequiredError, NotFoundError
from thought.tools.toolset import TOOL_ERRORS, WorkspaceToolset
from thought.workspace.edits import (
    AppendChange,
    InsertAtLineChange,
    PrependChange,
    ReplaceChange,
)
from thought.workspace.paths import path_module

logger = logging.getLogger(__name__)

WorkspaceRoot = Annotated[
    str,
    Field(description="Workspace root directory (absolute path to the user's working directory)"),
]

ChangeType = Literal["replace", "append", "prepend", "insert_at_line"]


class FileSystemTools(WorkspaceToolset):
    """File and directory tools bound to the server's engine and project context.

    Example:
        >>> tools = FileSystemTools(ThoughtSettings())
        >>> await tools.create_file("notes.md", "# Notes", workspace_root="/home/me/project")
        'Successfully created file at "/home/me/project/notes.md".\\n\\n[Note for AI assistants: ...]'
    """

    def get_tools(self) -> list:
        """Get list of filesystem tools.

        Returns:
            List of filesystem tool functions
        """
        return [
            self.create_file,
            self.edit_file,
            self.delete_file,
            self.move_file,
            self.copy_file,
            self.create_directory,
            self.list_directory,
            self.delete_directory,
        ]

    async def create_file(
        self,
        path: Annotated[str, Field(description="Path to the file to create (relative to workspace_root)")],
        content: Annotated[str, Field(description="Content to write to the file")],
        workspace_root: WorkspaceRoot,
        overwrite: Annotated[
            bool, Field(description="Whether to overwrite the file if it already exists")
        ] = False,
        create_parent_dirs: Annotated[
            bool, Field(description="Whether to create parent directories if they don't exist")
        ] = True,
    ) -> str:
        """Create a new file with the given content."""
        if not path:
            return self._create_error_response("File path cannot be empty.")

        try:
            (resolved,) = self._resolve(workspace_root, path)
            self.engine.create_file(
                resolved, content, overwrite=overwrite, create_parent_dirs=create_parent_dirs
            )
        except TOOL_ERRORS as e:
            return self._handle_error("create file", e)

        self.context.record_target(path, resolved)
        return self._create_success_response(f'Successfully created file at "{resolved}".')

    async def edit_file(
        self,
        path: Annotated[str, Field(description="Path to the file to edit (relative to workspace_root)")],
        change_type: Annotated[ChangeType, Field(description="Type of change to apply")],
        workspace_root: WorkspaceRoot,
        old_content: Annotated[
            str | None,
            Field(description='Content to replace (required for "replace" change type)'),
        ] = None,
        new_content: Annotated[
            str | None,
            Field(description='New content (required for "replace" change type)'),
        ] = None,
        content: Annotated[
            str | None,
            Field(
                description='Content to append/prepend/insert (required for "append", '
                '"prepend", "insert_at_line" change types)'
            ),
        ] = None,
        line: Annotated[
            int | None,
            Field(description='Line number for insertion (required for "insert_at_line", 0-based index)'),
        ] = None,
        create_backup: Annotated[
            bool, Field(description="Whether to create a backup of the original file")
        ] = True,
    ) -> str:
        """Edit an existing file by applying one change (replace, append, prepend, insert_at_line).

        Unlike batch edits, a change with a missing required field is rejected
        here instead of being skipped.
        """
        if not path:
            return self._create_error_response("File path cannot be empty.")

        if change_type == "replace":
            if not old_content or new_content is None:
                return self._create_error_response(
                    '"replace" change type requires both old_content and new_content parameters.'
                )
            change = ReplaceChange(old=old_content, new=new_content)
        elif change_type in ("append", "prepend"):
            if not content:
                return self._create_error_response(
                    f'"{change_type}" change type requires the content parameter.'
                )
            change_cls = AppendChange if change_type == "append" else PrependChange
            change = change_cls(content=content)
        else:
            if not content:
                return self._create_error_response(
                    '"insert_at_line" change type requires the content parameter.'
                )
            if line is None or line < 0:
                return self._create_error_response(
                    '"insert_at_line" change type requires a valid line parameter (0-based index).'
                )
            change = InsertAtLineChange(line=line, content=content)

        try:
            (resolved,) = self._resolve(workspace_root, path)
            if not Path(resolved).is_file():
                raise NotFoundError(resolved, f'File "{resolved}" does not exist.')
            if create_backup:
                self.engine.write_backup(resolved)
            result = self.engine.edit_file(resolved, [change])
        except TOOL_ERRORS as e:
            return self._handle_error("edit file", e)

        self.context.record_target(path, resolved)

        if result.skipped:
            reason = result.skipped[0].reason
            message = f'No changes made to "{resolved}": {change_type} change skipped ({reason}).'
        else:
            message = f'Successfully edited file "{resolved}" with {change_type} operation.'
        if create_backup:
            message += self._backup_note(resolved)
        return self._create_success_response(message)

    async def delete_file(
        self,
        path: Annotated[str, Field(description="Path to the file to delete (relative to workspace_root)")],
        workspace_root: WorkspaceRoot,
        create_backup: Annotated[
            bool, Field(description="Whether to create a backup of the file before deletion")
        ] = True,
        confirm_deletion: Annotated[
            bool, Field(description="Confirmation flag that must be true to delete the file")
        ] = True,
    ) -> str:
        """Delete a file, optionally keeping a backup sibling."""
        if not path:
            return self._create_error_response("File path cannot be empty.")
        if not confirm_deletion:
            return self._create_error_response(str(ConfirmationRequiredError()))

        try:
            (resolved,) = self._resolve(workspace_root, path)
            if not Path(resolved).is_file():
                raise NotFoundError(resolved, f'File "{resolved}" does not exist.')
            if create_backup:
                self.engine.write_backup(resolved)
            self.engine.delete_file(resolved)
        except TOOL_ERRORS as e:
            return self._handle_error("delete file", e)

        self.context.record_target(path, resolved)

        message = f'Successfully deleted file "{resolved}".'
        if create_backup:
            message += self._backup_note(resolved)
        return self._create_success_response(message)

    async def move_file(
        self,
        source_path: Annotated[str, Field(description="Path to the source file (relative to workspace_root)")],
        target_path: Annotated[str, Field(description="Path to the target location (relative to workspace_root)")],
        workspace_root: WorkspaceRoot,
        create_backup: Annotated[
            bool, Field(description="Whether to create a backup of the source file")
        ] = True,
        overwrite: Annotated[
            bool, Field(description="Whether to overwrite the target file if it exists")
        ] = False,
        create_target_dirs: Annotated[
            bool, Field(description="Whether to create target directories if they don't exist")
        ] = True,
    ) -> str:
        """Move or rename a file."""
        if not source_path:
            return self._create_error_response("Source path cannot be empty.")
        if not target_path:
            return self._create_error_response("Target path cannot be empty.")

        try:
            source, target = self._resolve(workspace_root, source_path, target_path)
            if create_backup and Path(source).is_file():
                self.engine.write_backup(source)
            self.engine.move_file(
                source, target, overwrite=overwrite, create_target_dirs=create_target_dirs
            )
        except TOOL_ERRORS as e:
            return self._handle_error("move file", e)

        self.context.record_target(target_path, target)

        message = f'Successfully moved file from "{source}" to "{target}".'
        if create_backup:
            message += self._backup_note(source)
        return self._create_success_response(message)

    async def copy_file(
        self,
        source_path: Annotated[str, Field(description="Path to the source file (relative to workspace_root)")],
        target_path: Annotated[str, Field(description="Path to the target location (relative to workspace_root)")],
        workspace_root: WorkspaceRoot,
        overwrite: Annotated[
            bool, Field(description="Whether to overwrite the target file if it exists")
        ] = False,
        create_target_dirs: Annotated[
            bool, Field(description="Whether to create target directories if they don't exist")
        ] = True,
    ) -> str:
        """Copy a file, leaving the source in place."""
        if not source_path:
            return self._create_error_response("Source path cannot be empty.")
        if not target_path:
            return self._create_error_response("Target path cannot be empty.")

        try:
            source, target = self._resolve(workspace_root, source_path, target_path)
            self.engine.copy_file(
                source, target, overwrite=overwrite, create_target_dirs=create_target_dirs
            )
        except TOOL_ERRORS as e:
            return self._handle_error("copy file", e)

        self.context.record_target(target_path, target)
        return self._create_success_response(
            f'Successfully copied file from "{source}" to "{target}".'
        )

    async def create_directory(
        self,
        path: Annotated[str, Field(description="Path to the directory to create (relative to workspace_root)")],
        workspace_root: WorkspaceRoot,
        recursive: Annotated[
            bool, Field(description="Whether to create parent directories if they don't exist")
        ] = True,
    ) -> str:
        """Create a directory. An existing directory is not an error."""
        if not path:
            return self._create_error_response("Directory path cannot be empty.")

        try:
            (resolved,) = self._resolve(workspace_root, path)
            existed = Path(resolved).is_dir()
            self.engine.create_directory(resolved, recursive=recursive)
        except TOOL_ERRORS as e:
            return self._handle_error("create directory", e)

        self.context.record_target(path, resolved, is_directory=True)
        if existed:
            return self._create_success_response(f'Directory "{resolved}" already exists.')
        return self._create_success_response(f'Successfully created directory at "{resolved}".')

    async def list_directory(
        self,
        path: Annotated[str, Field(description="Path to the directory to list (relative to workspace_root)")],
        workspace_root: WorkspaceRoot,
        include_hidden: Annotated[
            bool, Field(description="Whether to include hidden files (dotfiles)")
        ] = False,
    ) -> str:
        """List directory contents, directories first, each group sorted by name."""
        if not path:
            return self._create_error_response("Directory path cannot be empty.")

        try:
            (resolved,) = self._resolve(workspace_root, path)
            listing = self.engine.list_directory(resolved, include_hidden=include_hidden)
        except TOOL_ERRORS as e:
            return self._handle_error("list directory", e)

        # The listed directory is the project
        mod = path_module(resolved)
        self.context.set_current_project(mod.basename(mod.normpath(resolved)) or resolved, resolved)
        return listing.render()

    async def delete_directory(
        self,
        path: Annotated[str, Field(description="Path to the directory to delete (relative to workspace_root)")],
        workspace_root: WorkspaceRoot,
        recursive: Annotated[
            bool, Field(description="Whether to delete the directory with all its contents")
        ] = False,
        dry_run: Annotated[
            bool, Field(description="Report what would be deleted without deleting anything")
        ] = False,
        confirm_deletion: Annotated[
            bool, Field(description="Confirmation flag that must be true to delete the directory")
        ] = True,
    ) -> str:
        """Delete a directory, or preview the deletion with dry_run."""
        if not path:
            return self._create_error_response("Directory path cannot be empty.")
        if not confirm_deletion:
            return self._create_error_response(str(ConfirmationRequiredError()))

        try:
            (resolved,) = self._resolve(workspace_root, path)
            message = self.engine.delete_directory(resolved, recursive=recursive, dry_run=dry_run)
        except TOOL_ERRORS as e:
            return self._handle_error("delete directory", e)

        if not dry_run:
            self.context.record_target(path, resolved, is_directory=True)
        return self._create_success_response(message)
