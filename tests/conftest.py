"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import logging

import numpy as np
import pytest

from study_digits.models import LabeledVector
from study_digits.utils import logging_config


def make_vectors(rows):
    """Build LabeledVectors from ``(label, vector)`` pairs."""
    return [LabeledVector(label, np.array(vector)) for label, vector in rows]


@pytest.fixture
def vectors_from():
    """Factory fixture: ``vectors_from([(label, [x, y]), ...])``."""
    return make_vectors


@pytest.fixture
def toy_training_set():
    """Three 2-D points: 0:[0,0], 1:[10,10], 0:[0,1]."""
    return make_vectors([(0, [0, 0]), (1, [10, 10]), (0, [0, 1])])


@pytest.fixture
def blobs():
    """
    Fixture for well-separated labeled 2-D blobs.

    Returns 3 groups of 20 points around (0, 0), (50, 0) and (0, 50),
    labeled 0, 1 and 2, interleaved so no group is contiguous.
    """
    rng = np.random.default_rng(42)
    centers = np.array([[0.0, 0.0], [50.0, 0.0], [0.0, 50.0]])
    rows = []
    for i in range(20):
        for label, center in enumerate(centers):
            rows.append((label, center + rng.standard_normal(2)))
    return make_vectors(rows)


@pytest.fixture
def digit_lines():
    """Factory fixture producing ``n`` valid 785-field record lines."""
    def _lines(n, seed=0):
        rng = np.random.default_rng(seed)
        lines = []
        for i in range(n):
            pixels = rng.integers(0, 256, size=784)
            lines.append(",".join([str(i % 10)] + [str(p) for p in pixels]))
        return lines
    return _lines


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so each test starts clean."""
    yield
    root = logging.getLogger(logging_config.ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    logging_config._configured = False
