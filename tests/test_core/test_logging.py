"""
Tests for bundlerepo.core.logging
===================================

What's Being Tested:
    - configure_logging() sets the stdlib level and installs a renderer
"""

import logging

import pytest
import structlog

from bundlerepo.core.logging import configure_logging, get_structlog_processors


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().setLevel(logging.WARNING)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_applied(self) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_renderer(self) -> None:
        configure_logging("INFO", json_output=True)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_by_default(self) -> None:
        configure_logging()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert len(processors) == len(get_structlog_processors()) + 1
