"""Unit tests for thought.tools.toolset module."""

import logging

import pytest

from thought.exceptions import CriticalPathDeniedError, NotFoundError
from thought.tools.toolset import WorkspaceToolset


class EchoTools(WorkspaceToolset):
    def get_tools(self):
        return [self.echo]

    async def echo(self, path: str, workspace_root: str) -> str:
        (resolved,) = self._resolve(workspace_root, path)
        return self._create_success_response(resolved)


@pytest.mark.unit
@pytest.mark.tools
class TestWorkspaceToolset:
    """Tests for the toolset base class."""

    def test_cannot_instantiate_abstract_base(self, settings):
        with pytest.raises(TypeError):
            WorkspaceToolset(settings)

    def test_shares_given_context(self, settings, project_context):
        assert EchoTools(settings, project_context).context is project_context

    def test_resolve_checks_every_path(self, settings, temp_workspace):
        tools = EchoTools(settings)
        with pytest.raises(CriticalPathDeniedError):
            tools._resolve(str(temp_workspace), "ok.txt", ".env")

    def test_resolve_checks_resolved_paths(self, settings, temp_workspace):
        tools = EchoTools(settings)
        traversal = "../" * len(temp_workspace.parts) + "etc/hosts"
        with pytest.raises(CriticalPathDeniedError):
            tools._resolve(str(temp_workspace), traversal)

    def test_resolve_returns_resolved_paths(self, settings, temp_workspace):
        tools = EchoTools(settings)
        assert tools._resolve(str(temp_workspace), "a", "b/c") == [
            str(temp_workspace / "a"),
            str(temp_workspace / "b" / "c"),
        ]

    @pytest.mark.asyncio
    async def test_subclass_tool(self, settings, temp_workspace):
        result = await EchoTools(settings).echo("a.txt", workspace_root=str(temp_workspace))
        assert result.startswith(str(temp_workspace / "a.txt"))

    def test_handle_error_uses_message_of_expected_failures(self, settings):
        tools = EchoTools(settings)
        result = tools._handle_error("read file", NotFoundError("/x", 'File "/x" does not exist.'))
        assert result == 'Error: File "/x" does not exist.'

    def test_handle_error_prefixes_os_errors(self, settings, caplog):
        tools = EchoTools(settings)
        with caplog.at_level(logging.ERROR):
            result = tools._handle_error("write file", PermissionError("denied"))
        assert result == "Error: Failed to write file - denied"
        assert "Failed to write file: denied" in caplog.text

    def test_backup_note(self, settings):
        assert EchoTools(settings)._backup_note("/ws/a.md") == (
            ' A backup was created at "/ws/a.md.bak".'
        )
