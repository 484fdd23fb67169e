"""Path resolution against an explicit, caller-supplied workspace root.

Every tool call carries its own ``workspace_root``; there is no implicit
current-directory fallback. Roots arriving from IDE clients are sometimes
URL-encoded Windows paths (``/c%3A/Users/...``) or carry a doubled drive
prefix (``C:\\c%3A\\Users\\...``); both are repaired before use.

Whether a path is absolute is decided by the host OS. A drive-letter root is
only usable when the server runs on Windows; on POSIX it is rejected rather
than being treated as a relative filename. ``ntpath`` is still used to
normalize drive-letter paths for matching and display.
"""

import logging
import ntpath
import os
import re
from urllib.parse import unquote

from thought.exceptions import InvalidWorkspaceRootError, PathOutsideWorkspaceError

logger = logging.getLogger(__name__)

_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")
_ENCODED_DRIVE_URL = re.compile(r"^/[A-Za-z]%3A/", re.IGNORECASE)
_DOUBLE_ENCODED_DRIVE = re.compile(r"^[A-Za-z]:\\[A-Za-z]%3A\\", re.IGNORECASE)


def is_windows_path(path: str) -> bool:
    """Return True if ``path`` starts with a drive letter (``C:\\`` or ``C:/``)."""
    return bool(_WINDOWS_DRIVE.match(path))


def is_absolute_path(path: str) -> bool:
    """Return True if ``path`` is absolute on the host OS.

    Drive-letter paths only count on Windows hosts.
    """
    return os.path.isabs(path)


def normalize_windows_path(windows_path: str) -> str:
    """Repair URL-encoded Windows paths.

    Args:
        windows_path: Potentially URL-encoded Windows path

    Returns:
        Normalized path; inputs without encoding artifacts are returned unchanged

    Example:
        >>> normalize_windows_path("/c%3A/Users/me/project")
        'C:\\\\Users\\\\me\\\\project'
        >>> normalize_windows_path("C:\\\\c%3A\\\\Users\\\\me")
        'C:\\\\Users\\\\me'
    """
    if not windows_path:
        return windows_path

    if _DOUBLE_ENCODED_DRIVE.match(windows_path):
        drive = windows_path[3].upper()
        fixed = f"{drive}:\\{windows_path[8:]}"
        logger.info(f"Corrected double-encoded workspace path: {windows_path} -> {fixed}")
        return fixed

    if "%3a" not in windows_path.lower():
        return windows_path

    if _ENCODED_DRIVE_URL.match(windows_path):
        decoded = unquote(windows_path)
        drive = decoded[1].upper()
        rest = decoded[4:].replace("/", "\\")
        normalized = f"{drive}:\\{rest}"
        logger.info(f"Normalized URL-encoded Windows path: {windows_path} -> {normalized}")
        return normalized

    return unquote(windows_path)


def path_module(root: str):
    """``ntpath`` for drive-letter paths, the host's ``os.path`` otherwise."""
    return ntpath if is_windows_path(root) else os.path


def is_within(path: str, root: str) -> bool:
    """Return True if ``path`` is ``root`` or lies underneath it."""
    mod = path_module(root)
    norm_path = mod.normcase(mod.normpath(path))
    norm_root = mod.normcase(mod.normpath(root))
    try:
        return mod.commonpath([norm_path, norm_root]) == norm_root
    except ValueError:
        # Different drives on Windows
        return False


def resolve_workspace_path(
    workspace_root: str | None,
    target: str,
    allow_escape_workspace: bool = True,
) -> str:
    """Resolve ``target`` against ``workspace_root``.

    Absolute targets are returned unchanged when ``allow_escape_workspace`` is
    set. Otherwise, any result that is not inside the workspace root is
    rejected, whether it came from an absolute target or from ``..`` segments.

    Args:
        workspace_root: Absolute workspace directory supplied by the caller
        target: Relative or absolute target path
        allow_escape_workspace: Permit results outside the workspace root

    Returns:
        Absolute path as a string

    Raises:
        InvalidWorkspaceRootError: Root is empty, ``"."`` or not absolute
        PathOutsideWorkspaceError: Result escapes the root while escaping is disabled
    """
    if not workspace_root or workspace_root == ".":
        raise InvalidWorkspaceRootError(
            "workspace_root parameter is required and must be an absolute path"
        )

    root = normalize_windows_path(workspace_root)
    if not is_absolute_path(root):
        raise InvalidWorkspaceRootError(f"workspace_root must be an absolute path, got: {root}")

    if is_absolute_path(target):
        if not allow_escape_workspace and not is_within(target, root):
            logger.warning(f"Absolute path outside workspace rejected: {target} (workspace: {root})")
            raise PathOutsideWorkspaceError(target, root)
        return target

    resolved = os.path.normpath(os.path.join(root, target))

    if not allow_escape_workspace and not is_within(resolved, root):
        logger.warning(f"Relative path escapes workspace: {target} -> {resolved}")
        raise PathOutsideWorkspaceError(target, root)

    logger.debug(f"Path resolved: {target} -> {resolved}")
    return resolved


def sanitize_for_filename(text: str, extension: str = ".md") -> str:
    """Derive a filename from free text.

    Lowercases, collapses runs of non-alphanumerics to ``_``, trims leading
    and trailing underscores, truncates to 30 characters, then appends
    ``extension``.

    Example:
        >>> sanitize_for_filename("My Cool Project!", "_todo.md")
        'my_cool_project_todo.md'
    """
    name = re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")[:30]
    return f"{name}{extension}"


class PathResolver:
    """Resolves tool-supplied paths with a fixed escape policy.

    Example:
        >>> resolver = PathResolver(allow_escape_workspace=False)
        >>> resolver.resolve("/home/me/project", "src/app.py")
        '/home/me/project/src/app.py'
    """

    def __init__(self, allow_escape_workspace: bool = True):
        self.allow_escape_workspace = allow_escape_workspace

    def resolve(self, workspace_root: str | None, target: str) -> str:
        return resolve_workspace_path(workspace_root, target, self.allow_escape_workspace)
