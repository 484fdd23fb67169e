"""MCP server assembly.

Builds a FastMCP server, registers every toolset's tools on it, and runs it
over the configured transport.
"""

import logging

from mcp.server.fastmcp import FastMCP

from thought.config import ThoughtSettings
from thought.context import ProjectContext
from thought.tools import BatchTools, FileSystemTools, TodolistTools, WorkspaceToolset

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Workspace-scoped file operations for turning notes into todolists and "
    "working through them. Every tool requires workspace_root: pass the user's "
    "current working directory as an absolute path."
)


def _fastmcp_log_level(level: str) -> str:
    return "DEBUG" if level == "trace" else level.upper()


def create_toolsets(settings: ThoughtSettings, context: ProjectContext) -> list[WorkspaceToolset]:
    """Instantiate every toolset against one shared project context."""
    return [
        FileSystemTools(settings, context),
        BatchTools(settings, context),
        TodolistTools(settings, context),
    ]


def create_server(settings: ThoughtSettings, context: ProjectContext | None = None) -> FastMCP:
    """Create the MCP server with all tools registered.

    Args:
        settings: Effective settings
        context: Project context shared by all toolsets; created if omitted

    Returns:
        Configured FastMCP instance (not yet running)
    """
    context = context or ProjectContext(settings.project.tool_directories)

    server = FastMCP(
        settings.server.name,
        instructions=INSTRUCTIONS,
        host=settings.server.host,
        port=settings.server.port,
        log_level=_fastmcp_log_level(settings.server.log_level),
    )

    for toolset in create_toolsets(settings, context):
        for tool in toolset.get_tools():
            server.add_tool(tool)
            logger.debug(f"Registered tool: {tool.__name__} ({type(toolset).__name__})")

    logger.info(f"Server '{settings.server.name}' created")
    return server


def run_server(settings: ThoughtSettings, context: ProjectContext | None = None) -> None:
    """Create the server and block serving requests over the configured transport."""
    server = create_server(settings, context)
    transport = settings.server.transport
    if transport == "stdio":
        logger.info("Serving over stdio")
    else:
        logger.info(f"Serving over {transport} on {settings.server.host}:{settings.server.port}")
    server.run(transport=transport)
