"""Tests for the centralized logging configuration module."""

from __future__ import annotations

import logging

import pytest

from Restaurant_Guide.logging_config import LOG_FORMAT, configure_logging


@pytest.fixture(autouse=True)
def _reset_logging() -> None:
    """Reset root logger state between tests."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    data_logger = logging.getLogger("Restaurant_Guide.data")
    original_data_level = data_logger.level
    yield  # type: ignore[misc]
    root.setLevel(original_level)
    root.handlers = original_handlers
    data_logger.setLevel(original_data_level)


class TestConfigureLogging:
    """Tests for configure_logging() function."""

    def test_default_level_is_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Default call sets root logger to INFO."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_verbose_sets_debug(self) -> None:
        """verbose=True sets root logger to DEBUG."""
        configure_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_sets_warning(self) -> None:
        """quiet=True sets root logger to WARNING."""
        configure_logging(quiet=True)
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_beats_quiet(self) -> None:
        configure_logging(verbose=True, quiet=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_param_override(self) -> None:
        """Explicit level param sets the root logger level."""
        configure_logging(level="ERROR")
        assert logging.getLogger().level == logging.ERROR

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LOG_LEVEL env var sets root logger level."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_module_level_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LOG_LEVEL_DATA env var sets the data layer logger level."""
        monkeypatch.setenv("LOG_LEVEL_DATA", "DEBUG")
        configure_logging()
        assert logging.getLogger("Restaurant_Guide.data").level == logging.DEBUG

    def test_invalid_module_level_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL_DATA", "LOUD")
        logging.getLogger("Restaurant_Guide.data").setLevel(logging.NOTSET)
        configure_logging()
        assert logging.getLogger("Restaurant_Guide.data").level == logging.NOTSET

    def test_force_overrides_existing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """configure_logging() overrides a prior basicConfig(CRITICAL)."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logging.basicConfig(level=logging.CRITICAL)
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_invalid_env_level_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Invalid LOG_LEVEL env var falls back to INFO."""
        monkeypatch.setenv("LOG_LEVEL", "INVALID")
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_driver_loggers_demoted(self) -> None:
        """configure_logging() demotes aiosqlite and SQLAlchemy echo to WARNING."""
        configure_logging(verbose=True)
        assert logging.getLogger("aiosqlite").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestLogFormat:
    """Tests for the LOG_FORMAT constant."""

    def test_format_includes_timestamp(self) -> None:
        """LOG_FORMAT includes %(asctime)s for timestamp."""
        assert "%(asctime)s" in LOG_FORMAT

    def test_format_includes_name(self) -> None:
        """LOG_FORMAT includes %(name)s for logger name."""
        assert "%(name)s" in LOG_FORMAT
