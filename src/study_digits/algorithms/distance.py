"""
Distance functions over fixed-length numeric vectors.

All arithmetic happens in float64 so pixel values (0-255) accumulated over
784 components cannot overflow.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..errors import DimensionMismatchError
from ..models import VectorLike
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

EUCLIDEAN = "euclidean"
MANHATTAN = "manhattan"
METRICS = (EUCLIDEAN, MANHATTAN)
DEFAULT_METRIC = EUCLIDEAN


def resolve_metric(metric: Optional[str]) -> str:
    """Return *metric* if known, otherwise fall back to euclidean."""
    if metric is None:
        return DEFAULT_METRIC
    name = str(metric).lower()
    if name not in METRICS:
        logger.warning("Unknown metric %r, falling back to %s", metric, DEFAULT_METRIC)
        return DEFAULT_METRIC
    return name


def _pair(a: VectorLike, b: VectorLike) -> tuple[np.ndarray, np.ndarray]:
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(a.size, b.size)
    return a, b


def euclidean(a: VectorLike, b: VectorLike) -> float:
    """Euclidean (L2) distance between two equal-length vectors."""
    a, b = _pair(a, b)
    diff = a - b
    return float(np.sqrt(np.dot(diff, diff)))


def manhattan(a: VectorLike, b: VectorLike) -> float:
    """Manhattan (L1) distance between two equal-length vectors."""
    a, b = _pair(a, b)
    return float(np.sum(np.abs(a - b)))


def distance(a: VectorLike, b: VectorLike, metric: Optional[str] = DEFAULT_METRIC) -> float:
    """
    Distance between *a* and *b* under *metric*.

    Args:
        a: First vector
        b: Second vector of the same length
        metric: "euclidean" or "manhattan"; anything else means euclidean

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if resolve_metric(metric) == MANHATTAN:
        return manhattan(a, b)
    return euclidean(a, b)


def distances_to(
    matrix: np.ndarray, vector: VectorLike, metric: Optional[str] = DEFAULT_METRIC
) -> np.ndarray:
    """
    Distance from every row of *matrix* to *vector*.

    Args:
        matrix: (n, d) array of vectors
        vector: (d,) query vector
        metric: "euclidean" or "manhattan"

    Returns:
        (n,) float64 array of distances
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    vector = np.asarray(vector, dtype=np.float64)
    if matrix.shape[0] == 0:
        return np.empty(0, dtype=np.float64)
    if matrix.ndim != 2 or vector.ndim != 1 or matrix.shape[1] != vector.shape[0]:
        raise DimensionMismatchError(matrix.shape[-1], vector.size)

    diffs = matrix - vector[None, :]
    if resolve_metric(metric) == MANHATTAN:
        return np.sum(np.abs(diffs), axis=1)
    return np.sqrt(np.einsum("nd,nd->n", diffs, diffs))


def pairwise_distances(matrix: np.ndarray, metric: Optional[str] = DEFAULT_METRIC) -> np.ndarray:
    """Return the symmetric (n, n) distance matrix of the rows of *matrix*."""
    matrix = np.asarray(matrix, dtype=np.float64)
    n = matrix.shape[0]
    dist = np.zeros((n, n), dtype=np.float64)
    metric = resolve_metric(metric)
    for i in range(n):
        dist[i] = distances_to(matrix, matrix[i], metric)
    return dist
