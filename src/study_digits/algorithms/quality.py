"""
Cluster validity indices computed on a random sample of clustered points.

Both indices enumerate combinations of the sampled points (pairs for the
C-index, 4-point tuples for Goodman-Kruskal), so the sample sizes bound
the cost.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations, islice
from typing import Optional, Sequence, Tuple

import numpy as np

from ..errors import EmptySamplePartitionError, UndefinedIndexError
from ..models import stack_vectors
from ..utils.logging_config import get_logger
from .clustering import Cluster
from .distance import DEFAULT_METRIC, pairwise_distances

logger = get_logger(__name__)

DEFAULT_C_INDEX_SAMPLES = 1000
DEFAULT_GOODMAN_KRUSKAL_SAMPLES = 50
REDUCED_TIME_GOODMAN_KRUSKAL_SAMPLES = 10

# The three ways to split a 4-tuple (a, b, c, d) into two disjoint pairs.
_SPLITS = (((0, 1), (2, 3)), ((0, 2), (1, 3)), ((0, 3), (1, 2)))

# 4-point tuples are counted in batches of this size to bound memory.
TUPLE_BATCH_SIZE = 100_000


@dataclass
class QualityConfig:
    """Sample sizes for the quality indices."""

    c_index_samples: int = DEFAULT_C_INDEX_SAMPLES
    goodman_kruskal_samples: int = DEFAULT_GOODMAN_KRUSKAL_SAMPLES
    reduced_time: bool = False

    @property
    def effective_goodman_kruskal_samples(self) -> int:
        if self.reduced_time:
            return min(self.goodman_kruskal_samples, REDUCED_TIME_GOODMAN_KRUSKAL_SAMPLES)
        return self.goodman_kruskal_samples


def sample_points(
    clusters: Sequence[Cluster],
    samples: int,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Draw up to *samples* clustered points without replacement.

    Args:
        clusters: Clusters whose members form the population
        samples: Number of points; the whole population when larger
        rng: Random generator

    Returns:
        Tuple of ``(vectors, cluster_ids)``: an (m, d) float64 matrix and the
        (m,) id of the cluster each point came from
    """
    if rng is None:
        rng = np.random.default_rng()
    members = [m for cluster in clusters for m in cluster.members]
    ids = np.array([cluster.id for cluster in clusters for _ in cluster.members], dtype=int)
    n = len(members)
    m = min(max(samples, 0), n)
    picked = rng.choice(n, size=m, replace=False) if m else np.empty(0, dtype=int)
    return stack_vectors([members[i] for i in picked]), ids[picked]


def c_index_from_sample(
    vectors: np.ndarray, cluster_ids: np.ndarray, metric: str = DEFAULT_METRIC
) -> float:
    """
    C-index of an already sampled set of points.

    With all pair distances sorted ascending, alpha within-cluster pairs
    summing to gamma, ``min``/``max`` the sums of the alpha smallest/largest
    distances: ``(gamma - min) / (max - min)``. Lower is better.

    Raises:
        EmptySamplePartitionError: If no pair shares a cluster
        UndefinedIndexError: If max == min
    """
    n = len(cluster_ids)
    dist = pairwise_distances(vectors, metric)
    i, j = np.triu_indices(n, k=1)
    pair_dists = dist[i, j]
    within = cluster_ids[i] == cluster_ids[j]

    alpha = int(np.count_nonzero(within))
    if alpha == 0:
        raise EmptySamplePartitionError(
            f"C-index undefined: none of the {len(pair_dists)} sampled pairs share a cluster"
        )
    gamma = float(np.sum(pair_dists[within]))

    ordered = np.sort(pair_dists, kind="stable")
    min_sum = float(np.sum(ordered[:alpha]))
    max_sum = float(np.sum(ordered[-alpha:]))
    if max_sum == min_sum:
        raise UndefinedIndexError(
            "C-index undefined: smallest and largest pair-distance sums are equal"
        )
    return (gamma - min_sum) / (max_sum - min_sum)


def c_index(
    clusters: Sequence[Cluster],
    *,
    samples: int = DEFAULT_C_INDEX_SAMPLES,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    metric: str = DEFAULT_METRIC,
) -> float:
    """
    C-index of a clustering over a random sample of *samples* points.

    Every pair of sampled points is used.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    vectors, ids = sample_points(clusters, samples, rng)
    return c_index_from_sample(vectors, ids, metric)


def count_concordance(
    vectors: np.ndarray, cluster_ids: np.ndarray, metric: str = DEFAULT_METRIC
) -> Tuple[int, int]:
    """
    Concordant and discordant comparisons over all 4-point tuples.

    Tuples are generated lazily and counted TUPLE_BATCH_SIZE at a time, so
    memory stays bounded for large samples (the work still grows as n^4).

    Each tuple is split into two disjoint pairs in its three possible ways.
    Comparing pair P1 (distance d1) with P2 (distance d2), the comparison is
    concordant when the shorter pair is the within-cluster one and the longer
    is cross-cluster, and discordant for the opposite. Equal distances and
    pairs of the same kind count as neither.

    Returns:
        Tuple of ``(concordant, discordant)``
    """
    n = len(cluster_ids)
    if n < 4:
        return 0, 0
    dist = pairwise_distances(vectors, metric)
    same = cluster_ids[:, None] == cluster_ids[None, :]

    concordant = 0
    discordant = 0
    all_tuples = combinations(range(n), 4)
    while True:
        tuples = np.array(list(islice(all_tuples, TUPLE_BATCH_SIZE)), dtype=int)
        if tuples.size == 0:
            break
        for (a, b), (r, s) in _SPLITS:
            p1 = (tuples[:, a], tuples[:, b])
            p2 = (tuples[:, r], tuples[:, s])
            d1, d2 = dist[p1], dist[p2]
            w1, w2 = same[p1], same[p2]
            shorter_first = d1 < d2
            longer_first = d1 > d2
            concordant += int(np.count_nonzero(
                (shorter_first & w1 & ~w2) | (longer_first & ~w1 & w2)
            ))
            discordant += int(np.count_nonzero(
                (shorter_first & ~w1 & w2) | (longer_first & w1 & ~w2)
            ))
    return concordant, discordant


def goodman_kruskal_from_sample(
    vectors: np.ndarray, cluster_ids: np.ndarray, metric: str = DEFAULT_METRIC
) -> float:
    """
    Goodman-Kruskal index ``(C - D) / (C + D)`` of an already sampled set.

    Raises:
        EmptySamplePartitionError: If fewer than 4 points were sampled or no
            pair shares a cluster
        UndefinedIndexError: If there is no concordant or discordant comparison
    """
    n = len(cluster_ids)
    if n < 4:
        raise EmptySamplePartitionError(
            f"Goodman-Kruskal index needs at least 4 sampled points, got {n}"
        )
    if len(np.unique(cluster_ids)) == n:
        raise EmptySamplePartitionError(
            "Goodman-Kruskal index undefined: no sampled pair shares a cluster"
        )
    concordant, discordant = count_concordance(vectors, cluster_ids, metric)
    if concordant + discordant == 0:
        raise UndefinedIndexError(
            "Goodman-Kruskal index undefined: no concordant or discordant comparisons"
        )
    return (concordant - discordant) / float(concordant + discordant)


def goodman_kruskal_index(
    clusters: Sequence[Cluster],
    *,
    samples: int = DEFAULT_GOODMAN_KRUSKAL_SAMPLES,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    metric: str = DEFAULT_METRIC,
) -> float:
    """Goodman-Kruskal index of a clustering over *samples* random points."""
    if rng is None:
        rng = np.random.default_rng(seed)
    vectors, ids = sample_points(clusters, samples, rng)
    return goodman_kruskal_from_sample(vectors, ids, metric)

