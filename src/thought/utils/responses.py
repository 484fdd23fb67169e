"""Shared response helper functions for tools.

MCP tool results here are plain text the calling assistant reads directly.
All toolsets should use these helpers so successes and failures look the
same regardless of which tool produced them.
"""

WORKSPACE_ROOT_NOTE = (
    "[Note for AI assistants: When using this tool, always set the workspace_root "
    "parameter to the user's current working directory, not the tool's directory. "
    "Check last_terminal_cwd or conversation context.]"
)


def create_success_response(message: str, include_note: bool = True) -> str:
    """Create standardized success response.

    Args:
        message: Human-readable description of what was done
        include_note: Append the workspace_root reminder for the assistant

    Returns:
        Response text

    Example:
        >>> create_success_response("File created", include_note=False)
        'File created'
    """
    if not include_note:
        return message
    return f"{message}\n\n{WORKSPACE_ROOT_NOTE}"


def create_error_response(message: str) -> str:
    """Create standardized error response.

    Tools use this instead of raising so the assistant gets a readable
    explanation it can act on.

    Args:
        message: Human-friendly error message

    Returns:
        ``"Error: <message>"``

    Example:
        >>> create_error_response('File "a.txt" does not exist.')
        'Error: File "a.txt" does not exist.'
    """
    return f"Error: {message}"
