"""Logging configuration for the dredge command line."""

import logging
import sys
from typing import Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"

LOG_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}


def _get_console_handler(level: int) -> logging.StreamHandler:
    """Create a stderr handler so logs never mix with command output."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for the dredge package.

    Args:
        log_level: One of trace, debug, info, warn, error, off (default: info)

    Returns:
        The configured ``dredge`` logger
    """
    level = LOG_LEVELS.get((log_level or "info").lower())
    if level is None:
        raise ValueError(f"Unknown log level: {log_level}")

    logger = logging.getLogger("dredge")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(_get_console_handler(level))
    logger.propagate = False
    return logger
