"""
Logging setup shared by the package and the command line.

Usage:
    from study_digits.utils.logging_config import get_logger, setup_logging

    setup_logging()            # level from STUDY_DIGITS_LOG_LEVEL
    logger = get_logger(__name__)
"""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER_NAME = "study_digits"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name* (normally ``__name__``)."""
    return logging.getLogger(name)


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Configure the package logger with a single stderr handler.

    Calling this more than once only updates the level.

    Args:
        level: Logging level name or number. Defaults to the configured
            ``STUDY_DIGITS_LOG_LEVEL``.

    Returns:
        The package root logger.
    """
    global _configured

    if level is None:
        from ..config import config

        level = config.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        _configured = True

    return root
