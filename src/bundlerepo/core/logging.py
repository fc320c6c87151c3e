"""
bundlerepo.core.logging - Structured Logging Setup
====================================================

Every bundlerepo module logs through ``structlog.get_logger()`` with
snake_case event names and a bound ``component`` key. This module wires
structlog onto the standard library logging so an embedding build tool can
route the events wherever it routes its own logs.

Usage:
    >>> from bundlerepo.core.logging import configure_logging
    >>> configure_logging("DEBUG")                   # console output
    >>> configure_logging("INFO", json_output=True)  # JSON lines
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def get_structlog_processors() -> list[Any]:
    """Processors shared by the console and JSON renderers."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render JSON lines instead of the console renderer.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(log_level)
    logging.getLogger("filelock").setLevel(max(log_level, logging.INFO))

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[*get_structlog_processors(), renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
