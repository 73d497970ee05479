"""
Study Digits - Core Package

Instance-based learning experiments on 28x28 digit images stored as
784-dimensional pixel vectors.

This package provides:
- k-nearest-neighbor classification with training set condensing
- k-means clustering with C-index and Goodman-Kruskal quality scores
- Record file loading/writing and a command line front end
"""

__version__ = "0.1.0"

from .models import LabeledVector, VECTOR_DIMENSION

# Explicitly import subpackages to ensure they're discoverable
from . import algorithms
from . import utils

__all__ = [
    "LabeledVector",
    "VECTOR_DIMENSION",
    "algorithms",
    "utils",
]
