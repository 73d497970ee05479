"""
Exact nearest-neighbor search over a list of labeled vectors.

Every call ranks the candidates from scratch; nothing is cached between
calls, so the candidate list may grow or shrink freely between queries.
"""

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from ..errors import InvalidKError
from ..models import LabeledVector, VectorLike, as_vector, stack_vectors
from ..utils.logging_config import get_logger
from .distance import DEFAULT_METRIC, distances_to

logger = get_logger(__name__)

Query = Union[LabeledVector, VectorLike]


def rank_rows(matrix: np.ndarray, query: Query, metric: str = DEFAULT_METRIC) -> np.ndarray:
    """
    Row indices of an already stacked (n, d) *matrix*, nearest to *query* first.

    Lets callers that query the same candidates many times stack them once.
    The sort is stable, so rows at equal distance keep their order.
    """
    dists = distances_to(matrix, as_vector(query), metric)
    return np.argsort(dists, kind="stable")


def rank_by_distance(
    candidates: Sequence[LabeledVector], query: Query, metric: str = DEFAULT_METRIC
) -> List[LabeledVector]:
    """
    Return all candidates ordered by ascending distance to *query*.

    The sort is stable: candidates at exactly equal distance keep their
    relative input order.
    """
    if not candidates:
        return []
    order = rank_rows(stack_vectors(candidates), query, metric)
    return [candidates[i] for i in order]


def nearest(
    k: int,
    candidates: Sequence[LabeledVector],
    query: Query,
    metric: str = DEFAULT_METRIC,
) -> List[LabeledVector]:
    """
    The *k* candidates closest to *query*, nearest first.

    When *k* exceeds the number of candidates every candidate is returned
    exactly once.

    Args:
        k: Number of neighbors (>= 1)
        candidates: Labeled vectors to search
        query: A LabeledVector or a raw vector
        metric: "euclidean" or "manhattan"

    Raises:
        InvalidKError: If k < 1
        DimensionMismatchError: If query and candidates differ in length
    """
    if k < 1:
        raise InvalidKError(f"k must be >= 1, got {k}")
    if k > len(candidates):
        logger.debug("k=%d exceeds %d candidates, returning all", k, len(candidates))
    return rank_by_distance(candidates, query, metric)[:k]
