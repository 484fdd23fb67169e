"""Unit tests for configuration manager."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from thought.config.manager import (
    ConfigurationError,
    deep_merge,
    get_config_path,
    get_env_overrides,
    load_config,
    merge_with_env,
    save_config,
)
from thought.config.schema import ThoughtSettings


@pytest.fixture(autouse=True)
def no_dotenv(tmp_path, monkeypatch):
    """Keep a stray .env in the working directory out of these tests."""
    monkeypatch.chdir(tmp_path)


class TestGetConfigPath:
    """Test get_config_path function."""

    def test_returns_expected_path(self):
        """Test that get_config_path returns ~/.thought/settings.json."""
        assert get_config_path() == Path.home() / ".thought" / "settings.json"


class TestLoadConfig:
    """Test load_config function."""

    def test_load_nonexistent_file_returns_defaults(self, tmp_path):
        """Test loading non-existent file returns default settings."""
        settings = load_config(tmp_path / "nonexistent.json")

        assert isinstance(settings, ThoughtSettings)
        assert settings.server.transport == "stdio"
        assert settings.workspace.allow_escape_workspace is True

    def test_load_valid_json_succeeds(self, tmp_path):
        """Test loading valid JSON file succeeds."""
        config_path = tmp_path / "settings.json"
        config_data = {
            "server": {"transport": "sse", "port": 9000},
            "workspace": {"allow_escape_workspace": False, "backup_suffix": ".orig"},
        }
        config_path.write_text(json.dumps(config_data))

        settings = load_config(config_path)

        assert settings.server.transport == "sse"
        assert settings.server.port == 9000
        assert settings.server.host == "127.0.0.1"
        assert settings.workspace.allow_escape_workspace is False
        assert settings.workspace.backup_suffix == ".orig"

    def test_load_invalid_json_raises_error(self, tmp_path):
        """Test loading invalid JSON raises ConfigurationError."""
        config_path = tmp_path / "invalid.json"
        config_path.write_text("{invalid json")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_path)
        assert "Invalid JSON" in str(exc_info.value)

    def test_load_invalid_schema_raises_error(self, tmp_path):
        """Test loading JSON with invalid schema raises ConfigurationError."""
        config_path = tmp_path / "invalid_schema.json"
        config_path.write_text(json.dumps({"server": {"transport": "carrier-pigeon"}}))

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_path)
        assert "validation failed" in str(exc_info.value)


class TestSaveConfig:
    """Test save_config function."""

    def test_save_creates_directory(self, tmp_path):
        """Test save_config creates parent directory if needed."""
        config_path = tmp_path / "nested" / "dir" / "settings.json"
        save_config(ThoughtSettings(), config_path)
        assert config_path.exists()

    def test_save_omits_empty_project_section(self, tmp_path):
        """Test that a fresh settings file leaves out empty tool directories."""
        config_path = tmp_path / "settings.json"
        save_config(ThoughtSettings(), config_path)

        data = json.loads(config_path.read_text())
        assert "project" not in data
        assert data["server"]["transport"] == "stdio"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions only")
    def test_save_sets_restrictive_permissions(self, tmp_path):
        config_path = tmp_path / "settings.json"
        save_config(ThoughtSettings(), config_path)
        assert config_path.stat().st_mode & 0o777 == 0o600

    def test_save_and_load_roundtrip(self, tmp_path):
        """Test saving and loading preserves settings."""
        config_path = tmp_path / "settings.json"
        original = ThoughtSettings()
        original.server.port = 8123
        original.project.tool_directories = ["/opt/thought"]

        save_config(original, config_path)
        loaded = load_config(config_path)

        assert loaded.server.port == 8123
        assert loaded.project.tool_directories == ["/opt/thought"]


class TestEnvOverrides:
    """Test get_env_overrides and merge_with_env functions."""

    def test_no_env_vars_returns_empty_dict(self):
        """Test that no environment variables returns empty overrides."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_env_overrides() == {}

    def test_server_overrides(self):
        """Test server environment overrides."""
        env_vars = {
            "THOUGHT_TRANSPORT": "streamable-http",
            "THOUGHT_HOST": "0.0.0.0",
            "THOUGHT_PORT": "9100",
            "THOUGHT_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            overrides = get_env_overrides()

        assert overrides["server"] == {
            "transport": "streamable-http",
            "host": "0.0.0.0",
            "port": 9100,
            "log_level": "debug",
        }

    def test_invalid_port_raises(self):
        with patch.dict(os.environ, {"THOUGHT_PORT": "eighty"}, clear=True):
            with pytest.raises(ConfigurationError, match="THOUGHT_PORT"):
                get_env_overrides()

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("TRUE", True)])
    def test_allow_escape_flag(self, value, expected):
        with patch.dict(os.environ, {"THOUGHT_ALLOW_ESCAPE_WORKSPACE": value}, clear=True):
            overrides = get_env_overrides()
        assert overrides["workspace"]["allow_escape_workspace"] is expected

    def test_env_wins_over_file(self):
        """Test environment overrides take precedence over file settings."""
        settings = ThoughtSettings()
        settings.server.port = 8001
        with patch.dict(os.environ, {"THOUGHT_PORT": "9200"}, clear=True):
            merged = merge_with_env(settings)

        assert merged.server.port == 9200
        assert merged.server.transport == "stdio"

    def test_merge_without_overrides_returns_same_settings(self):
        settings = ThoughtSettings()
        with patch.dict(os.environ, {}, clear=True):
            assert merge_with_env(settings) is settings

    def test_invalid_override_raises(self):
        with patch.dict(os.environ, {"THOUGHT_TRANSPORT": "telnet"}, clear=True):
            with pytest.raises(ConfigurationError, match="Environment override validation failed"):
                merge_with_env(ThoughtSettings())

    def test_dotenv_file_is_loaded(self, tmp_path):
        (tmp_path / ".env").write_text("THOUGHT_HOST=10.0.0.5\n")
        with patch.dict(os.environ, {}, clear=True):
            overrides = get_env_overrides()
        assert overrides["server"]["host"] == "10.0.0.5"


class TestDeepMerge:
    """Test deep_merge function."""

    def test_merge_flat_dicts(self):
        """Test merging flat dictionaries."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self):
        """Test merging nested dictionaries."""
        base = {"server": {"host": "127.0.0.1", "port": 8000}}
        override = {"server": {"port": 9000}}
        assert deep_merge(base, override) == {"server": {"host": "127.0.0.1", "port": 9000}}

    def test_merge_does_not_mutate_base(self):
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}
