# ==============================================
# Tests for Configuration and Logging Setup
# ==============================================

import logging

import pytest

from csvload.config import AppConfig, load_config
from csvload.errors import ConfigurationError
from csvload.logging_config import setup_logging


class TestLoadConfig:
    def test_defaults(self, tmp_path, monkeypatch):
        """Without environment values the defaults apply."""
        for name in ("CSVLOAD_COMPACTION_INTERVAL", "CSVLOAD_TEXT_THRESHOLD", "CSVLOAD_PAUSE_ON_ERROR"):
            monkeypatch.delenv(name, raising=False)
        config = load_config(tmp_path / "missing.env")
        assert config.loader.compaction_interval == 100000
        assert config.inference.text_threshold == 255
        assert config.pause_on_error is True

    def test_environment_overrides(self, tmp_path, monkeypatch):
        """CSVLOAD_* variables override the defaults."""
        monkeypatch.setenv("CSVLOAD_COMPACTION_INTERVAL", "500")
        monkeypatch.setenv("CSVLOAD_BATCH_SIZE", "20")
        monkeypatch.setenv("CSVLOAD_TRUE_LITERAL", "Y")
        monkeypatch.setenv("CSVLOAD_PAUSE_ON_ERROR", "false")
        config = load_config(tmp_path / "missing.env")
        assert config.loader.compaction_interval == 500
        assert config.loader.batch_size == 20
        assert config.inference.true_literal == "Y"
        assert config.pause_on_error is False

    def test_env_file(self, tmp_path, monkeypatch):
        """Values are read from a .env file."""
        monkeypatch.setenv("CSVLOAD_OUTPUT_EXTENSION", "unused")
        monkeypatch.delenv("CSVLOAD_OUTPUT_EXTENSION")
        env_file = tmp_path / ".env"
        env_file.write_text("CSVLOAD_OUTPUT_EXTENSION=sqlite\n")
        config = load_config(env_file)
        assert config.store.output_extension == "sqlite"

    def test_bad_integer(self, tmp_path, monkeypatch):
        """A non-numeric integer setting is a ConfigurationError."""
        monkeypatch.setenv("CSVLOAD_BATCH_SIZE", "ten")
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.env")

    def test_sections_independent(self):
        """Each AppConfig gets its own section objects."""
        first, second = AppConfig(), AppConfig()
        first.loader.batch_size = 9
        assert second.loader.batch_size == 1


class TestSetupLogging:
    def test_verbose_is_debug(self):
        """verbose turns on DEBUG."""
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_name(self):
        """Level names are accepted, unknown ones fall back to WARNING."""
        setup_logging(level="info")
        assert logging.getLogger().level == logging.INFO
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.WARNING
