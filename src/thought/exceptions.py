"""Custom exceptions for workspace operation errors.

This module provides a hierarchy of exception classes for better error handling
and user-friendly error messages. The file operation engine raises these; the
tool layer turns them into ``Error: <message>`` text for the calling assistant.
"""


class ThoughtError(Exception):
    """Base exception for all thought errors.

    This is the root of the exception hierarchy. All custom exceptions
    should inherit from this class.

    Attributes:
        code: Machine-readable error code (e.g., "not_found")
    """

    code = "thought_error"


class InvalidWorkspaceRootError(ThoughtError):
    """Workspace root is missing, ``"."`` or not absolute after normalization."""

    code = "invalid_workspace_root"


class PathOutsideWorkspaceError(ThoughtError):
    """Absolute target escapes the workspace while escaping is disabled.

    Attributes:
        path: The offending target path
        workspace_root: The workspace root it was checked against
    """

    code = "path_outside_workspace"

    def __init__(self, path: str, workspace_root: str):
        """Initialize PathOutsideWorkspaceError.

        Args:
            path: The offending target path
            workspace_root: The workspace root it was checked against
        """
        self.path = path
        self.workspace_root = workspace_root
        super().__init__(f'Path "{path}" resolves outside workspace "{workspace_root}"')


class CriticalPathDeniedError(ThoughtError):
    """Operation targets a path on the critical-path denylist.

    Attributes:
        path: The path that matched the denylist
    """

    code = "critical_path_denied"

    def __init__(self, path: str):
        """Initialize CriticalPathDeniedError.

        Args:
            path: The path that matched the denylist
        """
        self.path = path
        super().__init__(f'Operation denied - "{path}" appears to be a critical system path.')


class AlreadyExistsError(ThoughtError):
    """Target exists and overwriting was not requested.

    Attributes:
        path: The existing path
    """

    code = "already_exists"

    def __init__(self, path: str, message: str | None = None):
        """Initialize AlreadyExistsError.

        Args:
            path: The existing path
            message: Optional override for the default message
        """
        self.path = path
        super().__init__(message or f'"{path}" already exists. Set overwrite=true to overwrite.')


class NotFoundError(ThoughtError):
    """File or directory does not exist.

    Attributes:
        path: The missing path
    """

    code = "not_found"

    def __init__(self, path: str, message: str | None = None):
        """Initialize NotFoundError.

        Args:
            path: The missing path
            message: Optional override for the default message
        """
        self.path = path
        super().__init__(message or f'"{path}" does not exist.')


class SourceNotFoundError(NotFoundError):
    """Source of a move or copy does not exist."""

    code = "source_not_found"

    def __init__(self, path: str):
        """Initialize SourceNotFoundError.

        Args:
            path: The missing source path
        """
        super().__init__(path, f'Source file "{path}" does not exist.')


class NotADirectoryPathError(ThoughtError):
    """Path exists but is not a directory."""

    code = "not_a_directory"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'"{path}" is not a directory.')


class NotEmptyError(ThoughtError):
    """Directory has contents and recursive deletion was not requested."""

    code = "not_empty"

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Directory is not empty: {path}. Use recursive=true to delete non-empty directories."
        )


class BackupWriteFailedError(ThoughtError):
    """Backup sibling could not be written; the primary mutation was not run.

    Attributes:
        path: The file whose backup failed
        original_error: Underlying OS error (optional)
    """

    code = "backup_write_failed"

    def __init__(self, path: str, original_error: Exception | None = None):
        """Initialize BackupWriteFailedError.

        Args:
            path: The file whose backup failed
            original_error: Underlying OS error
        """
        self.path = path
        self.original_error = original_error
        detail = f" - {original_error}" if original_error else ""
        super().__init__(f'Failed to create backup of "{path}"{detail}')


class ValidationFailedError(ThoughtError):
    """One or more batch operations failed the up-front validation pass.

    Attributes:
        problems: One line per rejected operation ("Operation <n>: <problem>")
    """

    code = "validation_failed"

    def __init__(self, problems: list[str]):
        """Initialize ValidationFailedError.

        Args:
            problems: One line per rejected operation
        """
        self.problems = problems
        super().__init__(
            "Validation failed for one or more operations:\n" + "\n".join(problems)
        )


class ConfirmationRequiredError(ThoughtError):
    """A destructive tool was called with its confirmation flag set to false."""

    code = "confirmation_required"

    def __init__(self):
        super().__init__("Deletion must be confirmed by setting confirm_deletion=true.")
