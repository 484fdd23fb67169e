"""Utility modules for thought."""

from thought.utils.responses import (
    WORKSPACE_ROOT_NOTE,
    create_error_response,
    create_success_response,
)

__all__ = [
    "WORKSPACE_ROOT_NOTE",
    "create_success_response",
    "create_error_response",
]
