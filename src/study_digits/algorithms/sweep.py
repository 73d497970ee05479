"""
Experiment orchestration: KNN evaluation and multi-K clustering sweeps.

Provides configuration and orchestration for classifying a sample set
(optionally against a condensed training set) and for clustering a training
set at several K values with quality indices per K.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import numpy as np

from ..models import LabeledVector
from ..utils.logging_config import get_logger
from ..utils.timing import timed
from .classification import ClassificationReport, SampleCallback, classify
from .clustering import cluster_sizes, kmeans, within_cluster_sum_of_squares
from .condensing import CondensedSink, CondenseResult, PassCallback, condense
from .distance import DEFAULT_METRIC, resolve_metric
from .quality import QualityConfig, c_index, goodman_kruskal_index

logger = get_logger(__name__)


@dataclass
class KnnConfig:
    """Configuration for a KNN evaluation run."""

    k_values: Tuple[int, ...] = (1,)
    metric: str = DEFAULT_METRIC  # "euclidean" or "manhattan"
    condense: bool = False  # Reduce the training set before classifying


@dataclass
class KnnResult:
    """Results from a KNN evaluation run."""

    report: ClassificationReport
    training_size: int
    reference_size: int
    condensed: Optional[CondenseResult] = None
    timings: Dict[str, float] = field(default_factory=dict)

    def format(self) -> str:
        lines = []
        if self.condensed is not None:
            lines.append(
                f"Condensed {self.training_size} -> {self.reference_size} vectors "
                f"in {self.condensed.passes} passes"
            )
        lines.append(self.report.format())
        return "\n".join(lines)


def run_knn_evaluation(
    training_set: Sequence[LabeledVector],
    samples: Sequence[LabeledVector],
    cfg: KnnConfig,
    *,
    sink: Optional[CondensedSink] = None,
    on_pass: Optional[PassCallback] = None,
    on_sample: Optional[SampleCallback] = None,
) -> KnnResult:
    """
    Classify *samples* against *training_set*, optionally condensing first.

    Pipeline:
    1. Condense the training set (if cfg.condense), handing the condensed
       set to *sink*
    2. Classify every sample for all cfg.k_values in one pass

    Args:
        training_set: Labeled reference vectors
        samples: Labeled vectors to classify
        cfg: KnnConfig with k values, metric and condensing flag
        sink: Optional persistence callable for the condensed set
        on_pass: Optional condensing pass callback
        on_sample: Optional per-sample classification callback

    Returns:
        KnnResult with the accuracy report and reference set sizes
    """
    metric = resolve_metric(cfg.metric)
    timings: Dict[str, float] = {}
    reference: Sequence[LabeledVector] = training_set
    condensed: Optional[CondenseResult] = None

    if cfg.condense:
        with timed("Condensed training set", logger) as t:
            condensed = condense(training_set, metric=metric, on_pass=on_pass, sink=sink)
        timings["condense"] = t.seconds
        reference = condensed.condensed

    with timed("Classified samples", logger) as t:
        report = classify(reference, samples, cfg.k_values, metric, on_sample=on_sample)
    timings["classify"] = t.seconds

    return KnnResult(
        report=report,
        training_size=len(training_set),
        reference_size=len(reference),
        condensed=condensed,
        timings=timings,
    )


@dataclass
class ClusterSweepConfig:
    """Configuration for a clustering sweep."""

    ks: Tuple[int, ...] = (5, 7, 9, 10, 12, 15)
    iterations: int = 50
    base_seed: int = 0
    compute_c_index: bool = True
    compute_goodman_kruskal: bool = True
    quality: QualityConfig = field(default_factory=QualityConfig)


@dataclass
class ClusterSweepResult:
    """Results from a clustering sweep, keyed by str(K)."""

    by_k: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def format(self) -> str:
        lines = []
        for key, entry in self.by_k.items():
            lines.append(f"K={key}: sizes {list(entry['cluster_sizes'].values())}")
            if entry.get("c_index") is not None:
                lines.append(f"  C-Index k={key}: {entry['c_index']}")
            if entry.get("goodman_kruskal") is not None:
                lines.append(f"  Goodman-Kruskal-Index k={key}: {entry['goodman_kruskal']}")
        return "\n".join(lines)


def run_cluster_sweep(
    training_set: Sequence[LabeledVector],
    cfg: ClusterSweepConfig,
    *,
    on_result: Optional[Callable[[int, Dict[str, Any]], None]] = None,
) -> ClusterSweepResult:
    """
    Cluster *training_set* for every K in cfg.ks and score each clustering.

    For each K a generator seeded with ``cfg.base_seed + K`` drives both the
    k-means seeding and the quality-index sampling, so a sweep is
    reproducible.

    Args:
        training_set: Vectors to cluster
        cfg: ClusterSweepConfig
        on_result: Optional ``(K, result_dict)`` callback after each K

    Returns:
        ClusterSweepResult with sizes, objective, indices and timings per K

    Raises:
        InvalidKError: If any K exceeds the training set size
    """
    by_k: Dict[str, Dict[str, Any]] = {}

    for K in cfg.ks:
        rng = np.random.default_rng(cfg.base_seed + K)
        timings: Dict[str, float] = {}

        with timed(f"Clustered with k={K}", logger) as t:
            clusters = kmeans(K, training_set, cfg.iterations, rng=rng)
        timings["kmeans"] = t.seconds

        result: Dict[str, Any] = {
            "cluster_sizes": cluster_sizes(clusters),
            "objective": within_cluster_sum_of_squares(clusters),
            "c_index": None,
            "goodman_kruskal": None,
            "clusters": clusters,
            "timings": timings,
        }

        if cfg.compute_c_index:
            with timed("Calculated C-Index", logger) as t:
                result["c_index"] = c_index(
                    clusters, samples=cfg.quality.c_index_samples, rng=rng
                )
            timings["c_index"] = t.seconds

        if cfg.compute_goodman_kruskal:
            with timed("Calculated Goodman-Kruskal-Index", logger) as t:
                result["goodman_kruskal"] = goodman_kruskal_index(
                    clusters,
                    samples=cfg.quality.effective_goodman_kruskal_samples,
                    rng=rng,
                )
            timings["goodman_kruskal"] = t.seconds

        by_k[str(K)] = result
        if on_result is not None:
            on_result(K, result)

    return ClusterSweepResult(by_k=by_k)

