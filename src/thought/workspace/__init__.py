"""Workspace-scoped file operation engine."""

from thought.workspace.batch import BatchExecutor, BatchReport, OperationResult
from thought.workspace.edits import ChangeOutcome, EditApplier, EditResult, apply_changes
from thought.workspace.engine import FileOperationEngine, format_size
from thought.workspace.guard import is_critical_path
from thought.workspace.paths import (
    PathResolver,
    normalize_windows_path,
    resolve_workspace_path,
    sanitize_for_filename,
)

__all__ = [
    # Paths
    "PathResolver",
    "resolve_workspace_path",
    "normalize_windows_path",
    "sanitize_for_filename",
    # Guard
    "is_critical_path",
    # Engine
    "FileOperationEngine",
    "format_size",
    "EditApplier",
    "EditResult",
    "ChangeOutcome",
    "apply_changes",
    # Batch
    "BatchExecutor",
    "BatchReport",
    "OperationResult",
]
