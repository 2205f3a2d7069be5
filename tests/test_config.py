"""
Configuration Tests
===================

Tests for settings loading and environment overrides.
"""

import logging

import pytest
from pydantic import ValidationError

from regionwatch.config import LoggingConfig, Settings, load_config, setup_logging


ENV_VARS = (
    "REGIONWATCH_STEP_INTERVAL",
    "REGIONWATCH_DEFAULT_TIMEOUT",
    "REGIONWATCH_LOG_LEVEL",
    "REGIONWATCH_LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove regionwatch environment overrides."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path, monkeypatch, clean_env):
        """Without a file or environment, defaults apply."""
        monkeypatch.chdir(tmp_path)

        settings = load_config()
        assert settings.polling.step_interval_seconds == 0.1
        assert settings.polling.default_timeout_seconds is None
        assert settings.logging.level == "INFO"

    def test_yaml_file(self, tmp_path, clean_env):
        path = tmp_path / "regionwatch.yaml"
        path.write_text(
            "polling:\n"
            "  step_interval_seconds: 0.02\n"
            "  default_timeout_seconds: 30\n"
            "logging:\n"
            "  format: json\n"
        )

        settings = load_config(str(path))
        assert settings.polling.step_interval_seconds == 0.02
        assert settings.polling.default_timeout_seconds == 30
        assert settings.logging.format == "json"

    def test_finds_own_file_in_working_directory(self, tmp_path, monkeypatch, clean_env):
        """regionwatch.yaml is picked up; a host application's config.yaml is not."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("polling:\n  step_interval_seconds: 0\n")
        (tmp_path / "regionwatch.yaml").write_text("polling:\n  step_interval_seconds: 0.25\n")

        settings = load_config()
        assert settings.polling.step_interval_seconds == 0.25

    def test_ignores_generic_config_file(self, tmp_path, monkeypatch, clean_env):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("polling:\n  step_interval_seconds: 0\n")

        settings = load_config()
        assert settings.polling.step_interval_seconds == 0.1

    def test_env_overrides_file(self, tmp_path, monkeypatch, clean_env):
        """Environment variables win over the file."""
        path = tmp_path / "regionwatch.yaml"
        path.write_text("polling:\n  step_interval_seconds: 0.02\n")
        monkeypatch.setenv("REGIONWATCH_STEP_INTERVAL", "0.5")
        monkeypatch.setenv("REGIONWATCH_DEFAULT_TIMEOUT", "12")
        monkeypatch.setenv("REGIONWATCH_LOG_LEVEL", "DEBUG")

        settings = load_config(str(path))
        assert settings.polling.step_interval_seconds == 0.5
        assert settings.polling.default_timeout_seconds == 12.0
        assert settings.logging.level == "DEBUG"

    def test_invalid_interval_rejected(self, tmp_path, clean_env):
        path = tmp_path / "regionwatch.yaml"
        path.write_text("polling:\n  step_interval_seconds: 0\n")

        with pytest.raises(ValidationError):
            load_config(str(path))


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_applied(self, monkeypatch):
        """The configured level reaches the root logger."""
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        monkeypatch.setattr(root, "level", logging.WARNING)

        setup_logging(Settings(logging=LoggingConfig(level="debug", format="json")))
        assert root.level == logging.DEBUG
