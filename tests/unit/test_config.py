"""
Unit tests for configuration loading.
"""

from pathlib import Path

import pytest

from codesense.config import (
    Config,
    ConfigurationError,
    apply_env_overrides,
    deep_merge,
    get_codesense_home,
    get_config,
    get_global_config_path,
    load_config,
    load_yaml_file,
)
from codesense.config.loader import _parse_env_value


class TestSchema:
    """Tests for configuration defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        config = Config()

        assert config.providers.model == "gemini/gemini-1.5-flash"
        assert config.providers.api_key_env == "GEMINI_API_KEY"
        assert config.limits.max_files_per_round == 3
        assert config.limits.max_file_chars == 25000
        assert config.limits.max_history_pairs == 10
        assert config.limits.summary_entries == 50
        assert config.limits.chat_entries == 30
        assert config.github.api_url == "https://api.github.com"
        assert config.github.max_file_size == 1024 * 1024

    def test_validation(self):
        """Test that out-of-range values are rejected."""
        with pytest.raises(Exception):  # Pydantic validation error
            Config.model_validate({"limits": {"max_files_per_round": 0}})

        with pytest.raises(Exception):
            Config.model_validate({"providers": {"temperature": 3.0}})


class TestHelpers:
    """Tests for loader helpers."""

    def test_home_from_env(self, mock_codesense_home: Path):
        """Test CODESENSE_HOME override."""
        assert get_codesense_home() == mock_codesense_home.resolve()
        assert get_global_config_path() == mock_codesense_home.resolve() / "config.yaml"

    def test_deep_merge(self):
        """Test nested merging."""
        base = {"limits": {"max_file_chars": 100, "chat_entries": 30}, "x": 1}
        override = {"limits": {"max_file_chars": 200}, "x": 2}

        assert deep_merge(base, override) == {
            "limits": {"max_file_chars": 200, "chat_entries": 30},
            "x": 2,
        }
        assert base["limits"]["max_file_chars"] == 100

    def test_parse_env_value(self):
        """Test env value coercion."""
        assert _parse_env_value("true") is True
        assert _parse_env_value("off") is False
        assert _parse_env_value("5") == 5
        assert _parse_env_value("0.5") == 0.5
        assert _parse_env_value("gemini/gemini-1.5-pro") == "gemini/gemini-1.5-pro"

    def test_apply_env_overrides(self, monkeypatch):
        """Test CODESENSE_<SECTION>_<KEY> overrides."""
        monkeypatch.setenv("CODESENSE_LIMITS_MAX_FILES_PER_ROUND", "5")
        monkeypatch.setenv("CODESENSE_PROVIDERS_MODEL", "openai/gpt-4o-mini")
        monkeypatch.setenv("CODESENSE_HOME", "/tmp/ignored")

        result = apply_env_overrides({"limits": {"chat_entries": 30}})

        assert result["limits"] == {"chat_entries": 30, "max_files_per_round": 5}
        assert result["providers"] == {"model": "openai/gpt-4o-mini"}
        assert "home" not in result

    def test_load_yaml_missing(self, temp_dir: Path):
        """Test that a missing file is empty config."""
        assert load_yaml_file(temp_dir / "nope.yaml") == {}

    def test_load_yaml_invalid(self, temp_dir: Path):
        """Test that invalid YAML raises ConfigurationError."""
        path = temp_dir / "bad.yaml"
        path.write_text("providers: [unclosed")

        with pytest.raises(ConfigurationError):
            load_yaml_file(path)

    def test_load_yaml_not_mapping(self, temp_dir: Path):
        """Test that a non-mapping document is rejected."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_yaml_file(path)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_precedence(self, mock_codesense_home: Path, temp_dir: Path, monkeypatch):
        """Test defaults < global < project < environment."""
        (mock_codesense_home / "config.yaml").write_text(
            "providers:\n  model: openai/gpt-4o\n  temperature: 0.5\n"
            "limits:\n  max_file_chars: 1000\n"
        )
        project = temp_dir / "project"
        project.mkdir()
        (project / ".codesense.yaml").write_text("limits:\n  max_file_chars: 2000\n")
        monkeypatch.setenv("CODESENSE_PROVIDERS_TEMPERATURE", "0.7")

        config = load_config(project_path=project)

        assert config.providers.model == "openai/gpt-4o"
        assert config.providers.temperature == 0.7
        assert config.limits.max_file_chars == 2000
        assert config.limits.max_files_per_round == 3

    def test_skip_sources(self, mock_codesense_home: Path, temp_dir: Path, monkeypatch):
        """Test skipping project and environment sources."""
        (temp_dir / ".codesense.yaml").write_text("limits:\n  chat_entries: 5\n")
        monkeypatch.setenv("CODESENSE_LIMITS_CHAT_ENTRIES", "7")

        config = load_config(project_path=temp_dir, skip_project=True, skip_env=True)

        assert config.limits.chat_entries == 30

    def test_invalid_values(self, mock_codesense_home: Path, temp_dir: Path):
        """Test that validation failures raise ConfigurationError."""
        (mock_codesense_home / "config.yaml").write_text("limits:\n  max_files_per_round: 99\n")

        with pytest.raises(ConfigurationError):
            load_config(project_path=temp_dir)

    def test_get_config_cached(self, mock_codesense_home: Path, monkeypatch, temp_dir: Path):
        """Test that get_config caches until reloaded."""
        monkeypatch.chdir(temp_dir)

        first = get_config()
        assert get_config() is first
        assert get_config(reload=True) is not first
