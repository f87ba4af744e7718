"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handler setup, and source handling.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from modules.backend.core import logging as logging_module
from modules.backend.core.logging import (
    VALID_SOURCES,
    get_logger,
    log_with_source,
    setup_logging,
)

TEST_CONFIG = {
    "level": "DEBUG",
    "format": "json",
    "handlers": {
        "console": {"enabled": True},
        "file": {
            "enabled": False,
            "path": "logs/system.jsonl",
            "max_bytes": 5242880,
            "backup_count": 3,
        },
    },
}


@pytest.fixture(autouse=True)
def _reset_logging_cache():
    logging_module._logging_config = None
    yield
    logging_module._logging_config = None


class TestValidSources:
    def test_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"web", "cli", "api", "internal", "unknown"})

    def test_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestLoggingConfigLoading:
    def test_reads_and_validates_yaml(self):
        with patch("modules.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG):
            config = logging_module._load_logging_config()

        assert config.level == "DEBUG"
        assert config.handlers.file.path == "logs/system.jsonl"

    def test_is_cached(self):
        with patch(
            "modules.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG
        ) as loader:
            logging_module._load_logging_config()
            logging_module._load_logging_config()

        loader.assert_called_once()


class TestSetupLogging:
    def test_parameters_override_yaml(self):
        with patch("modules.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG):
            setup_logging(level="WARNING", enable_console=True, enable_file_logging=False)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_console_can_be_disabled(self):
        with patch("modules.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG):
            setup_logging(enable_console=False, enable_file_logging=False)

        assert logging.getLogger().handlers == []

    def test_file_handler_writes_under_project_root(self, tmp_path):
        with (
            patch("modules.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG),
            patch("modules.backend.core.logging.find_project_root", return_value=tmp_path),
        ):
            setup_logging(enable_console=False, enable_file_logging=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(tmp_path / "logs" / "system.jsonl")
        handlers[0].close()
        logging.getLogger().removeHandler(handlers[0])

    def test_noisy_libraries_are_quieted(self):
        with patch("modules.backend.core.logging.load_yaml_config", return_value=TEST_CONFIG):
            setup_logging(level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING


class TestLogWithSource:
    def test_passes_source_and_fields(self):
        logger = MagicMock()

        log_with_source(logger, "cli", "info", "API request", path="/api/v1/notes")

        logger.info.assert_called_once_with("API request", source="cli", path="/api/v1/notes")

    def test_level_is_case_insensitive(self):
        logger = MagicMock()
        log_with_source(logger, "internal", "WARNING", "careful")
        logger.warning.assert_called_once()

    def test_get_logger_returns_bound_logger(self):
        logger = get_logger("modules.test")
        assert hasattr(logger, "info")
