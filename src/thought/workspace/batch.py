"""Batch execution of typed file operations.

A batch moves through ``validate -> preview | execute``:

1. Every entry is parsed into a typed operation, its paths are resolved and
   checked against the critical-path denylist. Any problem rejects the whole
   batch before touching the filesystem.
2. A dry run describes each operation against the current filesystem state
   and returns without mutating.
3. Otherwise operations run strictly in order, one at a time. A failure is
   recorded; execution halts there unless ``continue_on_error`` is set.

Batches are not transactional: a halted batch leaves behind whatever the
completed operations produced.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from thought.exceptions import ThoughtError, ValidationFailedError
from thought.workspace.engine import FileOperationEngine, describe_edit
from thought.workspace.guard import is_critical_path
from thought.workspace.operations import (
    CopyFileOperation,
    CreateDirectoryOperation,
    CreateFileOperation,
    DeleteDirectoryOperation,
    DeleteFileOperation,
    EditFileOperation,
    MoveFileOperation,
    Operation,
    OperationParseError,
    parse_operation,
)
from thought.workspace.paths import PathResolver

if TYPE_CHECKING:
    from thought.context import ProjectContext

logger = logging.getLogger(__name__)

HALT_NOTICE = (
    "Batch execution halted due to error. "
    "Set continue_on_error=true to continue execution after errors."
)


@dataclass
class PlannedOperation:
    """A validated operation with its paths resolved, in (source, target) order."""

    index: int
    operation: Operation
    resolved: tuple[str, ...]

    @property
    def number(self) -> int:
        return self.index + 1


@dataclass
class OperationResult:
    index: int
    operation_type: str
    status: Literal["success", "error"]
    message: str
    description: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    def render(self) -> str:
        if self.succeeded:
            return f"✓ Operation {self.index + 1}: {self.description} - Success"
        return f"✗ Operation {self.index + 1}: {self.description} - Failed: {self.message}"


@dataclass
class BatchReport:
    """Outcome of a batch run or preview."""

    total: int
    dry_run: bool = False
    results: list[OperationResult] = field(default_factory=list)
    previews: list[str] = field(default_factory=list)
    halted: bool = False

    @property
    def executed(self) -> int:
        return len(self.results)

    @property
    def success(self) -> bool:
        return all(result.succeeded for result in self.results)

    def render(self) -> str:
        if self.dry_run:
            lines = "\n".join(f"{i}. {preview}" for i, preview in enumerate(self.previews, 1))
            return (
                f"Dry run: {self.total} operations validated successfully.\n\n"
                f"Operations:\n{lines}\n\n"
                "To execute these operations, run this tool again with dry_run=false."
            )

        lines = [result.render() for result in self.results]
        if self.halted:
            lines.append(HALT_NOTICE)
        return f"Executed {self.executed} of {self.total} operations:\n\n" + "\n".join(lines)


def _critical_problem(number: int, user_paths: tuple[str, ...], path: str) -> str:
    if len(user_paths) > 1:
        return (
            f"Operation {number}: Invalid path - "
            "source or target appears to be a critical system path"
        )
    return f'Operation {number}: Invalid path - "{path}" appears to be a critical system path'


class BatchExecutor:
    """Validates, previews and runs batches against a :class:`FileOperationEngine`.

    Example:
        >>> executor = BatchExecutor(FileOperationEngine())
        >>> report = executor.run(
        ...     [{"type": "create_file", "path": "a.txt", "content": "1"}],
        ...     workspace_root="/tmp/ws",
        ... )
        >>> report.success
        True
    """

    def __init__(
        self,
        engine: FileOperationEngine,
        resolver: PathResolver | None = None,
        context: "ProjectContext | None" = None,
    ):
        self.engine = engine
        self.resolver = resolver or PathResolver()
        self.context = context
        self._handlers: dict[str, Callable[[Any, tuple[str, ...]], str]] = {
            "create_file": self._create_file,
            "edit_file": self._edit_file,
            "delete_file": self._delete_file,
            "move_file": self._move_file,
            "copy_file": self._copy_file,
            "create_directory": self._create_directory,
            "delete_directory": self._delete_directory,
        }

    def validate(self, operations: Sequence[Any], workspace_root: str) -> list[PlannedOperation]:
        """Parse, resolve and vet every operation.

        Raises:
            InvalidWorkspaceRootError: workspace_root is missing, "." or relative
            ValidationFailedError: One or more operations were rejected
        """
        # Surface a bad root once, not once per operation
        self.resolver.resolve(workspace_root, ".")

        planned: list[PlannedOperation] = []
        problems: list[str] = []

        for index, raw in enumerate(operations):
            number = index + 1
            try:
                operation = parse_operation(raw)
            except OperationParseError as e:
                problems.append(f"Operation {number}: {e}")
                continue

            user_paths = operation.user_paths()
            critical = [path for path in user_paths if is_critical_path(path)]
            if critical:
                problems.append(_critical_problem(number, user_paths, critical[0]))
                continue

            try:
                resolved = tuple(self.resolver.resolve(workspace_root, path) for path in user_paths)
            except ThoughtError as e:
                problems.append(f"Operation {number}: {e}")
                continue

            # ".." segments can still land on a critical path
            critical = [path for path in resolved if is_critical_path(path)]
            if critical:
                problems.append(_critical_problem(number, user_paths, critical[0]))
                continue

            planned.append(PlannedOperation(index=index, operation=operation, resolved=resolved))

        if problems:
            logger.warning(f"Batch validation failed: {len(problems)} of {len(operations)} rejected")
            raise ValidationFailedError(problems)

        return planned

    def preview(self, planned: Sequence[PlannedOperation]) -> list[str]:
        """Describe each operation against the filesystem as it is now.

        Operations are previewed independently; effects of earlier operations
        in the same batch are not simulated.
        """
        previews = []
        for item in planned:
            operation = item.operation
            description = operation.describe()
            note = self._preview_note(operation, item.resolved)
            previews.append(f"{description} - {note}" if note else description)
        return previews

    def _preview_note(self, operation: Operation, resolved: tuple[str, ...]) -> str:
        target = Path(resolved[-1])

        if isinstance(operation, (CreateFileOperation, MoveFileOperation, CopyFileOperation)):
            if isinstance(operation, (MoveFileOperation, CopyFileOperation)):
                if not Path(resolved[0]).is_file():
                    return "would fail: source does not exist"
            if target.exists():
                if operation.overwrite:
                    return "target exists and would be overwritten"
                return "would fail: target exists and overwrite is false"
            return ""

        if isinstance(operation, EditFileOperation):
            return "" if target.is_file() else "would fail: file does not exist"

        if isinstance(operation, DeleteFileOperation):
            return "" if target.exists() else "file does not exist, nothing to delete"

        if isinstance(operation, CreateDirectoryOperation):
            return "directory already exists" if target.is_dir() else ""

        if isinstance(operation, DeleteDirectoryOperation):
            try:
                return self.engine.delete_directory(target, operation.recursive, dry_run=True)
            except ThoughtError as e:
                return f"would fail: {e}"

        return ""

    def execute(self, planned: Sequence[PlannedOperation], continue_on_error: bool = False) -> BatchReport:
        """Run validated operations in order."""
        report = BatchReport(total=len(planned))
        last_success: PlannedOperation | None = None

        for item in planned:
            operation = item.operation
            handler = self._handlers[operation.type]
            try:
                message = handler(operation, item.resolved)
            except Exception as e:
                logger.error(f"Batch operation {item.number} ({operation.type}) failed: {e}")
                report.results.append(
                    OperationResult(
                        index=item.index,
                        operation_type=operation.type,
                        status="error",
                        message=str(e),
                        description=operation.describe(),
                    )
                )
                if not continue_on_error:
                    report.halted = True
                    break
                continue

            report.results.append(
                OperationResult(
                    index=item.index,
                    operation_type=operation.type,
                    status="success",
                    message=message,
                    description=operation.describe(),
                )
            )
            last_success = item

        if last_success is not None and self.context is not None:
            self._record_project(last_success)

        logger.info(
            f"Batch finished: {report.executed} of {report.total} executed, success={report.success}"
        )
        return report

    def run(
        self,
        operations: Sequence[Any],
        workspace_root: str,
        dry_run: bool = False,
        continue_on_error: bool = False,
    ) -> BatchReport:
        """Validate then preview or execute ``operations``.

        Raises:
            InvalidWorkspaceRootError: workspace_root is missing, "." or relative
            ValidationFailedError: One or more operations were rejected
        """
        planned = self.validate(operations, workspace_root)
        if dry_run:
            return BatchReport(total=len(planned), dry_run=True, previews=self.preview(planned))
        return self.execute(planned, continue_on_error)

    def _record_project(self, item: PlannedOperation) -> None:
        operation = item.operation
        is_directory = isinstance(operation, (CreateDirectoryOperation, DeleteDirectoryOperation))
        self.context.record_target(operation.user_paths()[-1], item.resolved[-1], is_directory)

    def _create_file(self, op: CreateFileOperation, paths: tuple[str, ...]) -> str:
        return self.engine.create_file(paths[0], op.content, overwrite=op.overwrite)

    def _edit_file(self, op: EditFileOperation, paths: tuple[str, ...]) -> str:
        if op.create_backup:
            self.engine.write_backup(paths[0])
        result = self.engine.edit_file(paths[0], op.changes)
        return describe_edit(paths[0], result)

    def _delete_file(self, op: DeleteFileOperation, paths: tuple[str, ...]) -> str:
        if op.create_backup:
            self.engine.write_backup(paths[0])
        return self.engine.delete_file(paths[0])

    def _move_file(self, op: MoveFileOperation, paths: tuple[str, ...]) -> str:
        source, target = paths
        if op.create_backup:
            self.engine.write_backup(source)
        return self.engine.move_file(source, target, overwrite=op.overwrite)

    def _copy_file(self, op: CopyFileOperation, paths: tuple[str, ...]) -> str:
        source, target = paths
        return self.engine.copy_file(source, target, overwrite=op.overwrite)

    def _create_directory(self, op: CreateDirectoryOperation, paths: tuple[str, ...]) -> str:
        return self.engine.create_directory(paths[0], recursive=op.recursive)

    def _delete_directory(self, op: DeleteDirectoryOperation, paths: tuple[str, ...]) -> str:
        return self.engine.delete_directory(paths[0], recursive=op.recursive, dry_run=op.dry_run)
