"""Wall-clock timing for long-running steps."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class Timer:
    """Elapsed seconds of a ``timed`` block, filled in when the block exits."""
    seconds: float = 0.0


@contextmanager
def timed(message: str, log: Optional[logging.Logger] = None) -> Iterator[Timer]:
    """Measure the enclosed block and log ``"<message> in <seconds>s"``.

    Usage::

        with timed("Clustered with k=5", logger) as t:
            clusters = kmeans(5, training_set, 50)
        print(t.seconds)
    """
    timer = Timer()
    start = time.perf_counter()
    try:
        yield timer
    finally:
        timer.seconds = time.perf_counter() - start
        if log is not None:
            log.info("%s in %.3fs", message, timer.seconds)
