"""Tool implementations for thought."""

from thought.tools.batch import BatchTools
from thought.tools.filesystem import FileSystemTools
from thought.tools.todolist import TodolistTools
from thought.tools.toolset import WorkspaceToolset

__all__ = ["WorkspaceToolset", "FileSystemTools", "BatchTools", "TodolistTools"]
