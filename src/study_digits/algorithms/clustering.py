"""
K-means clustering over labeled vectors.

Runs a fixed number of assign/recompute iterations from randomly chosen
seed vectors. Membership is recorded both on the clusters and on each
vector's ``cluster`` attribute so the quality indices can use it afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..errors import InvalidKError
from ..models import LabeledVector, stack_vectors
from ..utils.logging_config import get_logger
from .distance import EUCLIDEAN, distances_to

logger = get_logger(__name__)


@dataclass
class Cluster:
    """One k-means cluster: a stable id, its current center and members."""

    id: int
    center: np.ndarray
    members: List[LabeledVector] = field(default_factory=list)

    def __post_init__(self):
        """Store the center as a float64 copy."""
        self.center = np.array(self.center, dtype=np.float64)

    def add(self, labeled_vector: LabeledVector) -> None:
        """Add a member and record this cluster's id on it."""
        labeled_vector.cluster = self.id
        self.members.append(labeled_vector)

    def recompute_center(self) -> bool:
        """
        Move the center to the mean of the members, then clear the members
        for the next assignment pass.

        Returns:
            False if the cluster had no members; the center is then left
            unchanged.
        """
        if not self.members:
            logger.warning("Cluster %d has no members; keeping its center", self.id)
            return False
        self.center = stack_vectors(self.members).mean(axis=0)
        self.members = []
        return True

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def labels(self) -> List[int]:
        return [m.label for m in self.members]

    @property
    def vectors(self) -> List[np.ndarray]:
        return [m.vector for m in self.members]


def _assign(X: np.ndarray, clusters: List[Cluster]) -> np.ndarray:
    """Index of the nearest cluster for each row of *X* (lowest id on ties)."""
    dists = np.empty((X.shape[0], len(clusters)), dtype=np.float64)
    for j, cluster in enumerate(clusters):
        dists[:, j] = distances_to(X, cluster.center, EUCLIDEAN)
    return np.argmin(dists, axis=1)


def kmeans(
    k: int,
    training_set: Sequence[LabeledVector],
    iterations: int,
    *,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> List[Cluster]:
    """
    Cluster *training_set* into *k* groups with a fixed iteration count.

    Each iteration assigns every vector to its nearest center (euclidean).
    Centers are recomputed after every iteration except the last, so the
    returned clusters keep their final members.

    Args:
        k: Number of clusters
        training_set: Vectors to cluster; their ``cluster`` field is updated
        iterations: Number of assignment passes (>= 1)
        rng: Random generator used to pick the seed vectors
        seed: Seed for a new generator when *rng* is not given

    Returns:
        List of k clusters with ids 0..k-1

    Raises:
        InvalidKError: If k < 1 or k > len(training_set)
        ValueError: If iterations < 1
    """
    n = len(training_set)
    if k < 1:
        raise InvalidKError(f"K must be >= 1, got {k}")
    if k > n:
        raise InvalidKError(f"K ({k}) cannot exceed number of samples ({n})")
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    if rng is None:
        rng = np.random.default_rng(seed)

    X = stack_vectors(training_set)
    seed_idx = rng.choice(n, size=k, replace=False)
    clusters = [Cluster(id=i, center=X[idx]) for i, idx in enumerate(seed_idx)]

    for t in range(iterations):
        labels = _assign(X, clusters)
        for item, j in zip(training_set, labels):
            clusters[j].add(item)

        # Members stay attached after the final pass.
        if t + 1 == iterations:
            break

        degenerate = sum(1 for cluster in clusters if not cluster.recompute_center())
        if degenerate:
            logger.info("Iteration %d: %d empty cluster(s)", t + 1, degenerate)

    logger.debug("k-means k=%d finished %d iterations", k, iterations)
    return clusters


def cluster_sizes(clusters: Sequence[Cluster]) -> Dict[int, int]:
    """Member count per cluster id."""
    return {cluster.id: cluster.size for cluster in clusters}


def within_cluster_sum_of_squares(clusters: Sequence[Cluster]) -> float:
    """Sum of squared euclidean distances of members to their cluster center."""
    total = 0.0
    for cluster in clusters:
        if not cluster.members:
            continue
        diffs = stack_vectors(cluster.members) - cluster.center
        total += float(np.sum(diffs ** 2))
    return total
