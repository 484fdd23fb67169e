"""Utility functions for CLI module."""

import locale
import os
import platform
import sys

from rich.console import Console


def get_console(stderr: bool = False) -> Console:
    """Create Rich console with proper encoding for Windows.

    On Windows in non-interactive mode (subprocess, pipe, etc.), the default
    encoding is often CP1252 which cannot handle Unicode characters. This
    function detects such cases and forces UTF-8 encoding.

    Args:
        stderr: Write to stderr (used while stdout carries the stdio transport)

    Returns:
        Console: Configured Rich console instance
    """
    if platform.system() == "Windows" and not sys.stdout.isatty():
        encoding = locale.getpreferredencoding() or ""
        if "utf" not in encoding.lower():
            os.environ["PYTHONIOENCODING"] = "utf-8"
            return Console(stderr=stderr, force_terminal=True, legacy_windows=False)
    return Console(stderr=stderr)
