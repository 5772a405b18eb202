"""
Logging Configuration

Centralized logging configuration for the ISS tracker.
All modules should use this logger for consistent, structured output.

Usage:
    from logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("orbit_path_built", points=91)
    logger.warning("provider_failed", provider="ipapi.co", reason="timeout")
    logger.error("orbit_path_empty")
"""

import logging
import sys
from typing import Optional

import structlog

from config import config

# Format for the stdlib handlers; structlog renders the message itself
LOG_FORMAT = "%(message)s"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                      json_output: bool = True) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int
        Logging level (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    json_output : bool
        Render events as JSON lines. Console key/value output otherwise.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    structlog.stdlib.BoundLogger
        Structured logger bound to the stdlib logger of that name
    """
    return structlog.get_logger(name)


# Configure default logging on module import
configure_logging(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
