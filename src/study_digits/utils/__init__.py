"""Utility modules for Study Digits."""

from .logging_config import get_logger, setup_logging
from .dataset_loader import (
    parse_record,
    format_record,
    load_labeled_vectors,
    write_labeled_vectors,
)
from .timing import Timer, timed

__all__ = [
    "get_logger",
    "setup_logging",
    "parse_record",
    "format_record",
    "load_labeled_vectors",
    "write_labeled_vectors",
    "Timer",
    "timed",
]
