"""Workspace fixtures for testing file operations."""

import pytest

from thought.context import ProjectContext
from thought.workspace.engine import FileOperationEngine


@pytest.fixture
def temp_workspace(tmp_path):
    """Create isolated temporary workspace for each test.

    Returns:
        Path: Temporary directory path to use as workspace_root
    """
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def sample_files(temp_workspace):
    """Create sample file structure for testing.

    Structure:
        workspace/
            notes.md          "# Notes\\nfirst\\nsecond"
            todo.md           unchecked and checked items
            .hidden
            src/
                app.py
            docs/
                guide.md
    """
    (temp_workspace / "notes.md").write_text("# Notes\nfirst\nsecond", encoding="utf-8")
    (temp_workspace / "todo.md").write_text(
        "# Todo\n- [ ] Write tests\n- [x] Set up repo\n- [ ] Ship release\n", encoding="utf-8"
    )
    (temp_workspace / ".hidden").write_text("secret", encoding="utf-8")
    (temp_workspace / "src").mkdir()
    (temp_workspace / "src" / "app.py").write_text("print('hello')\n", encoding="utf-8")
    (temp_workspace / "docs").mkdir()
    (temp_workspace / "docs" / "guide.md").write_text("guide", encoding="utf-8")
    return temp_workspace


@pytest.fixture
def engine():
    """File operation engine with the default backup suffix."""
    return FileOperationEngine()


@pytest.fixture
def project_context():
    """Fresh project context per test."""
    return ProjectContext()
