"""
Tests for KNN evaluation and clustering sweep orchestration.
"""

import numpy as np
import pytest

from study_digits.algorithms.quality import QualityConfig
from study_digits.algorithms.sweep import (
    ClusterSweepConfig,
    ClusterSweepResult,
    KnnConfig,
    KnnResult,
    run_cluster_sweep,
    run_knn_evaluation,
)
from study_digits.errors import InvalidKError


def test_knn_config_defaults():
    """Test KnnConfig default values."""
    cfg = KnnConfig()
    assert cfg.k_values == (1,)
    assert cfg.metric == "euclidean"
    assert cfg.condense is False


def test_cluster_sweep_config_defaults():
    """Test ClusterSweepConfig default values."""
    cfg = ClusterSweepConfig()
    assert cfg.ks == (5, 7, 9, 10, 12, 15)
    assert cfg.iterations == 50
    assert cfg.base_seed == 0
    assert cfg.compute_c_index is True
    assert cfg.compute_goodman_kruskal is True
    assert cfg.quality.c_index_samples == 1000
    assert cfg.quality.goodman_kruskal_samples == 50


# ------------------------------------------------------------------
# run_knn_evaluation
# ------------------------------------------------------------------


def test_run_knn_evaluation_basic(blobs):
    """Test evaluation against the full training set."""
    cfg = KnnConfig(k_values=(1, 3))

    result = run_knn_evaluation(blobs[:45], blobs[45:], cfg)

    assert isinstance(result, KnnResult)
    assert result.condensed is None
    assert result.training_size == result.reference_size == 45
    assert result.report.accuracies() == {1: 100.0, 3: 100.0}
    assert set(result.timings) == {"classify"}


def test_run_knn_evaluation_with_condensing(blobs):
    """Test condensing before classification."""
    sunk = []
    passes = []
    cfg = KnnConfig(k_values=(1,), metric="manhattan", condense=True)

    result = run_knn_evaluation(
        blobs[:45],
        blobs[45:],
        cfg,
        sink=sunk.append,
        on_pass=lambda *args: passes.append(args),
    )

    assert result.condensed is not None
    assert result.reference_size == len(result.condensed.condensed) < 45
    assert sunk == [result.condensed.condensed]
    assert len(passes) == result.condensed.passes
    assert result.report.accuracy(1) == 100.0
    assert set(result.timings) == {"condense", "classify"}
    assert "Condensed 45 ->" in result.format()
    assert "k=1: 100.00%" in result.format()


def test_run_knn_evaluation_unknown_metric_falls_back(blobs):
    cfg = KnnConfig(metric="chebyshev")

    result = run_knn_evaluation(blobs[:30], blobs[30:], cfg)

    assert result.report.metric == "euclidean"


def test_run_knn_evaluation_on_sample(blobs):
    seen = []

    run_knn_evaluation(
        blobs[:30], blobs[30:40], KnnConfig(), on_sample=lambda s, v: seen.append(s)
    )

    assert seen == blobs[30:40]


# ------------------------------------------------------------------
# run_cluster_sweep
# ------------------------------------------------------------------


def small_sweep(**kwargs):
    defaults = dict(
        ks=(2, 3),
        iterations=5,
        quality=QualityConfig(c_index_samples=30, goodman_kruskal_samples=10),
    )
    defaults.update(kwargs)
    return ClusterSweepConfig(**defaults)


def test_run_cluster_sweep_basic(blobs):
    """Test a sweep with both quality indices."""
    result = run_cluster_sweep(blobs, small_sweep())

    assert isinstance(result, ClusterSweepResult)
    assert list(result.by_k) == ["2", "3"]
    for key, entry in result.by_k.items():
        assert len(entry["clusters"]) == int(key)
        assert sum(entry["cluster_sizes"].values()) == len(blobs)
        assert entry["objective"] >= 0.0
        assert 0.0 <= entry["c_index"] <= 1.0
        assert -1.0 <= entry["goodman_kruskal"] <= 1.0
        assert {"kmeans", "c_index", "goodman_kruskal"} <= set(entry["timings"])


def test_run_cluster_sweep_without_indices(blobs):
    cfg = small_sweep(compute_c_index=False, compute_goodman_kruskal=False)

    result = run_cluster_sweep(blobs, cfg)

    for entry in result.by_k.values():
        assert entry["c_index"] is None
        assert entry["goodman_kruskal"] is None
        assert set(entry["timings"]) == {"kmeans"}


def test_run_cluster_sweep_reproducible(blobs):
    first = run_cluster_sweep(blobs, small_sweep(base_seed=3))
    second = run_cluster_sweep(blobs, small_sweep(base_seed=3))

    for key in first.by_k:
        a, b = first.by_k[key], second.by_k[key]
        assert a["cluster_sizes"] == b["cluster_sizes"]
        assert a["c_index"] == b["c_index"]
        assert a["goodman_kruskal"] == b["goodman_kruskal"]
        for ca, cb in zip(a["clusters"], b["clusters"]):
            np.testing.assert_array_equal(ca.center, cb.center)


def test_run_cluster_sweep_on_result(blobs):
    seen = []

    run_cluster_sweep(
        blobs,
        small_sweep(compute_goodman_kruskal=False),
        on_result=lambda k, entry: seen.append(k),
    )

    assert seen == [2, 3]


def test_run_cluster_sweep_format(blobs):
    result = run_cluster_sweep(blobs, small_sweep(ks=(3,)))

    text = result.format()

    assert "K=3: sizes" in text
    assert "C-Index k=3:" in text
    assert "Goodman-Kruskal-Index k=3:" in text


def test_run_cluster_sweep_k_too_large(vectors_from):
    training = vectors_from([(0, [0, 0]), (1, [1, 1])])

    with pytest.raises(InvalidKError):
        run_cluster_sweep(training, small_sweep(ks=(3,)))
