"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handlers and source handling.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from modules.backend.core import logging as logging_module
from modules.backend.core.logging import (
    VALID_SOURCES,
    _resolve_log_path,
    get_logger,
    log_with_source,
    setup_logging,
)


@pytest.fixture
def logging_config():
    """A logging.yaml equivalent with file logging enabled."""
    return {
        "level": "INFO",
        "format": "json",
        "handlers": {
            "console": {"enabled": True},
            "file": {
                "enabled": True,
                "path": "logs/system.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    }


@pytest.fixture(autouse=True)
def _reset_cached_config():
    logging_module._logging_config = None
    yield
    logging_module._logging_config = None


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_contains_every_frontend(self):
        """Should list the frontends that talk to the backend."""
        assert VALID_SOURCES == frozenset({"web", "cli", "editor", "api", "internal", "unknown"})

    def test_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestLoggingConfigLoading:
    """Tests for logging configuration loading from YAML."""

    def test_reads_logging_yaml(self, logging_config):
        """Should load configuration through load_yaml_config."""
        with patch(
            "modules.backend.core.logging.load_yaml_config",
            return_value=logging_config,
        ) as mock_load:
            config = logging_module._load_logging_config()

        mock_load.assert_called_once_with("logging.yaml")
        assert config["handlers"]["file"]["path"] == "logs/system.jsonl"

    def test_config_is_cached(self, logging_config):
        """Should read the file only once."""
        with patch(
            "modules.backend.core.logging.load_yaml_config",
            return_value=logging_config,
        ) as mock_load:
            first = logging_module._load_logging_config()
            second = logging_module._load_logging_config()

        assert first is second
        mock_load.assert_called_once()

    def test_missing_file_propagates(self):
        """Should raise FileNotFoundError if logging.yaml doesn't exist."""
        with patch(
            "modules.backend.core.logging.load_yaml_config",
            side_effect=FileNotFoundError("Configuration file not found: logging.yaml"),
        ):
            with pytest.raises(FileNotFoundError, match="logging.yaml"):
                logging_module._load_logging_config()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_override_level(self, logging_config):
        """Explicit parameters should override config values."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger().level == logging.DEBUG

    def test_uses_config_defaults(self, logging_config):
        """Should use values from logging.yaml when not overridden."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(enable_file_logging=False)

        assert logging.getLogger().level == logging.INFO

    def test_console_only(self, logging_config):
        """Should install a single stdout handler when file logging is off."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(format_type="console", enable_file_logging=False)

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert handler_types == ["StreamHandler"]

    def test_file_logging_writes_jsonl(self, tmp_path, logging_config):
        """Should add a RotatingFileHandler at the resolved path."""
        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config), \
             patch("modules.backend.core.logging._resolve_log_path", return_value=log_file):
            setup_logging(enable_console=False, enable_file_logging=True)

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert handler_types == ["RotatingFileHandler"]
        assert log_file.parent.is_dir()

    def test_quiets_noisy_libraries(self, logging_config):
        """Should raise third-party loggers to WARNING."""
        with patch("modules.backend.core.logging._load_logging_config", return_value=logging_config):
            setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_structlog_logger(self):
        logger = get_logger("modules.editor.controller")

        assert hasattr(logger, "bind")
        assert hasattr(logger, "info")


class TestLogWithSource:
    """Tests for log_with_source."""

    def test_adds_source_field(self):
        """Should pass the source alongside the other fields."""
        logger = MagicMock()

        log_with_source(logger, "editor", "info", "Note saved", note_id="abc")

        logger.info.assert_called_once_with("Note saved", source="editor", note_id="abc")

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_supports_every_level(self, level):
        logger = MagicMock()

        log_with_source(logger, "cli", level.upper(), "Message")

        getattr(logger, level).assert_called_once_with("Message", source="cli")

    def test_unrecognized_source_is_unknown(self):
        logger = MagicMock()

        log_with_source(logger, "telepathy", "info", "Message")

        logger.info.assert_called_once_with("Message", source="unknown")

    def test_raises_on_invalid_level(self):
        """Should raise AttributeError for unknown levels."""
        logger = get_logger("test")

        with pytest.raises(AttributeError):
            log_with_source(logger, "web", "nonexistent_level", "Test")


class TestResolveLogPath:
    """Tests for _resolve_log_path."""

    def test_relative_to_project_root(self, tmp_path):
        with patch("modules.backend.core.logging.find_project_root", return_value=tmp_path):
            assert _resolve_log_path("logs/system.jsonl") == tmp_path / "logs" / "system.jsonl"
