"""
Algorithm Core Library - nearest-neighbor classification and k-means clustering.

This module provides the numeric core with minimal dependencies, separate
from the command line and file handling. Designed for reuse and testing.
"""

from .distance import (
    EUCLIDEAN,
    MANHATTAN,
    METRICS,
    distance,
    euclidean,
    manhattan,
    resolve_metric,
)
from .neighbors import nearest, rank_by_distance
from .condensing import CondenseResult, absorb_pass, condense
from .classification import ClassificationReport, classify, majority_vote
from .clustering import Cluster, kmeans
from .quality import QualityConfig, c_index, goodman_kruskal_index
from .sweep import (
    KnnConfig,
    KnnResult,
    ClusterSweepConfig,
    ClusterSweepResult,
    run_knn_evaluation,
    run_cluster_sweep,
)

__all__ = [
    # Distances
    "EUCLIDEAN",
    "MANHATTAN",
    "METRICS",
    "distance",
    "euclidean",
    "manhattan",
    "resolve_metric",
    # Nearest neighbors
    "nearest",
    "rank_by_distance",
    "CondenseResult",
    "absorb_pass",
    "condense",
    "ClassificationReport",
    "classify",
    "majority_vote",
    # Clustering
    "Cluster",
    "kmeans",
    "QualityConfig",
    "c_index",
    "goodman_kruskal_index",
    # Experiment orchestration
    "KnnConfig",
    "KnnResult",
    "ClusterSweepConfig",
    "ClusterSweepResult",
    "run_knn_evaluation",
    "run_cluster_sweep",
]
