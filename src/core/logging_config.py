"""Structured logging configuration.

This module initializes structlog loggers with a stable JSON format.
Rendered events are routed through the standard logging module so the
CLI keeps stdout free for its own output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured JSON output.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def configure_cli_logging(level: int = logging.INFO) -> None:
    """Send rendered log events to stderr for command-line runs."""
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
