"""Unit tests for thought.workspace.guard module."""

import logging

import pytest

from thought.exceptions import CriticalPathDeniedError
from thought.workspace.guard import ensure_not_critical, is_critical_path, normalize_for_matching


@pytest.mark.unit
class TestIsCriticalPath:
    """Tests for the critical-path denylist."""

    @pytest.mark.parametrize(
        "path",
        [
            "/etc/passwd",
            "/etc/shadow",
            "/bin/sh",
            "/sbin/init",
            "/boot/vmlinuz",
            "/proc/1/status",
            "/sys/kernel/x",
            "/dev/null",
            "/var/log/syslog",
            "/var/spool/cron/root",
        ],
    )
    def test_unix_system_paths(self, path):
        assert is_critical_path(path)

    @pytest.mark.parametrize(
        "path",
        [
            "C:\\Windows\\System32\\x",
            "c:/windows/system32/x",
            "C:\\Program Files\\App\\app.exe",
            "C:\\Program Files (x86)\\App\\app.exe",
            "D:\\System Volume Information",
            "C:\\Users\\me\\AppData\\Roaming\\thing",
        ],
    )
    def test_windows_system_paths(self, path):
        assert is_critical_path(path)

    @pytest.mark.parametrize(
        "path",
        [
            ".git/config",
            "project/.git/HEAD",
            ".github/workflows/ci.yml",
            "node_modules/left-pad/index.js",
            "package-lock.json",
            "web/yarn.lock",
            ".env",
            "config/.env",
            "/home/me/.ssh/authorized_keys",
            "/home/me/.ssh/id_rsa",
            "certs/server.pem",
        ],
    )
    def test_vcs_dependency_and_secret_paths(self, path):
        assert is_critical_path(path)

    @pytest.mark.parametrize(
        "path",
        ["config/prod.env", "deploy/staging.env", "backup/old_id_rsa", "keys/team_authorized_keys"],
    )
    def test_secret_suffixes_match_any_filename(self, path):
        assert is_critical_path(path)

    @pytest.mark.parametrize(
        "path",
        [
            "src/app.ts",
            "README.md",
            "/home/me/project/notes.md",
            "docs/environment.md",
            ".envrc",
            "my.github.io/index.html",
            "C:\\Users\\me\\project\\main.py",
            "",
        ],
    )
    def test_ordinary_paths_are_allowed(self, path):
        assert not is_critical_path(path)

    def test_matching_is_case_insensitive(self):
        assert is_critical_path("/ETC/hosts")
        assert is_critical_path("Keys/Server.PEM")

    def test_separator_style_does_not_matter(self):
        assert is_critical_path("C:\\Windows\\System32\\x") == is_critical_path("C:/Windows/System32/x")

    def test_normalize_for_matching(self):
        assert normalize_for_matching("C:\\Users\\Me") == "c:/users/me"


@pytest.mark.unit
class TestEnsureNotCritical:
    """Tests for ensure_not_critical."""

    def test_passes_for_safe_paths(self):
        ensure_not_critical("a.txt", "src/b.txt")

    def test_raises_for_first_critical_path(self, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(CriticalPathDeniedError) as exc_info:
                ensure_not_critical("a.txt", "/etc/hosts", ".env")

        assert exc_info.value.path == "/etc/hosts"
        assert "critical system path" in str(exc_info.value)
        assert "Critical path denied" in caplog.text
