"""Critical-path denylist.

Best-effort pattern matching over a fixed list of system, VCS, dependency and
secret locations. This is a guard rail against accidental damage, not a
security boundary.
"""

import logging
import re

from thought.exceptions import CriticalPathDeniedError

logger = logging.getLogger(__name__)

# Matched against the lowercased path with backslashes turned into slashes
CRITICAL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        # Unix system directories
        r"^/etc/",
        r"^/bin/",
        r"^/sbin/",
        r"^/boot/",
        r"^/proc/",
        r"^/sys/",
        r"^/dev/",
        r"^/var/log/",
        r"^/var/spool/",
        # Windows system directories
        r"^[a-z]:/windows/",
        r"^[a-z]:/program files[^/]*/",
        r"^[a-z]:/system",
        r"^[a-z]:/users/[^/]+/appdata/",
        # VCS metadata
        r"(^|/)\.git/",
        r"(^|/)\.github/",
        # Dependency directories and lockfiles
        r"(^|/)node_modules/",
        r"(^|/)package-lock\.json$",
        r"(^|/)yarn\.lock$",
        # Secrets
        r"\.env$",
        r"authorized_keys$",
        r"id_rsa$",
        r"\.pem$",
    )
)


def normalize_for_matching(path: str) -> str:
    """Lowercase and convert backslashes to forward slashes."""
    return path.lower().replace("\\", "/")


def is_critical_path(path: str) -> bool:
    """Return True if ``path`` matches the critical-path denylist.

    Example:
        >>> is_critical_path("/etc/passwd")
        True
        >>> is_critical_path("C:\\\\Windows\\\\System32\\\\x")
        True
        >>> is_critical_path("src/app.ts")
        False
    """
    if not path:
        return False
    normalized = normalize_for_matching(path)
    return any(pattern.search(normalized) for pattern in CRITICAL_PATTERNS)


def ensure_not_critical(*paths: str) -> None:
    """Raise CriticalPathDeniedError for the first critical path in ``paths``."""
    for path in paths:
        if is_critical_path(path):
            logger.warning(f"Critical path denied: {path}")
            raise CriticalPathDeniedError(path)
