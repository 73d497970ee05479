"""
k-nearest-neighbor classification with per-k accuracy reporting.

Each sample is ranked against the training set once; every requested k
votes on a prefix of that single ranking.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np

from ..errors import InvalidKError
from ..models import LabeledVector, stack_vectors
from ..utils.logging_config import get_logger
from .distance import DEFAULT_METRIC
from .neighbors import rank_rows

logger = get_logger(__name__)

SampleCallback = Callable[[LabeledVector, Dict[int, int]], None]


def majority_vote(labels: Sequence[int]) -> int:
    """
    Most frequent label in *labels*.

    Ties go to the tied label that appears first in *labels*, which callers
    pass ordered nearest to farthest.
    """
    if not labels:
        raise ValueError("Cannot vote on an empty label list")
    counts = Counter(labels)
    best = max(counts.values())
    return next(label for label in labels if counts[label] == best)


def _validate_k_values(k_values: Iterable[int]) -> List[int]:
    """Requested k values in the given order, duplicates dropped."""
    ks = list(dict.fromkeys(k_values))
    if not ks:
        raise InvalidKError("At least one k value is required")
    for k in ks:
        if k < 1:
            raise InvalidKError(f"k must be >= 1, got {k}")
    return ks


def _votes(
    labels: np.ndarray,
    matrix: np.ndarray,
    sample: LabeledVector,
    k_values: Sequence[int],
    metric: str,
) -> Dict[int, int]:
    ranked_labels = labels[rank_rows(matrix, sample, metric)].tolist()
    return {k: majority_vote(ranked_labels[:k]) for k in k_values}


def vote_for_k_values(
    training_set: Sequence[LabeledVector],
    sample: LabeledVector,
    k_values: Sequence[int],
    metric: str = DEFAULT_METRIC,
) -> Dict[int, int]:
    """
    Voted label for *sample* under each k in *k_values*.

    A k larger than the training set votes over the whole training set.
    """
    labels = np.array([c.label for c in training_set], dtype=int)
    return _votes(labels, stack_vectors(training_set), sample, k_values, metric)


@dataclass
class ClassificationReport:
    """Per-k misclassification counts for one classification run."""

    k_values: List[int]
    n_samples: int
    misclassified: Dict[int, int] = field(default_factory=dict)
    metric: str = DEFAULT_METRIC

    def accuracy(self, k: int) -> float:
        """Accuracy for *k* in percent, rounded to two decimals."""
        if self.n_samples == 0:
            raise ZeroDivisionError("No samples were classified")
        correct = self.n_samples - self.misclassified.get(k, 0)
        return round(100.0 * correct / self.n_samples, 2)

    def accuracies(self) -> Dict[int, float]:
        return {k: self.accuracy(k) for k in self.k_values}

    def format(self) -> str:
        lines = [f"Classified {self.n_samples} samples ({self.metric})"]
        for k in self.k_values:
            lines.append(
                f"k={k}: {self.accuracy(k):.2f}% "
                f"({self.misclassified.get(k, 0)} misclassified)"
            )
        return "\n".join(lines)


def classify(
    training_set: Sequence[LabeledVector],
    samples: Sequence[LabeledVector],
    k_values: Iterable[int],
    metric: str = DEFAULT_METRIC,
    on_sample: Optional[SampleCallback] = None,
) -> ClassificationReport:
    """
    Classify *samples* against *training_set* for every k in *k_values*.

    Args:
        training_set: Labeled reference vectors
        samples: Labeled vectors to classify; their labels are the truth
        k_values: Neighbor counts to evaluate in the same pass
        metric: "euclidean" or "manhattan"
        on_sample: Optional ``(sample, votes_by_k)`` callback after each sample

    Returns:
        ClassificationReport with misclassification counts per k

    Raises:
        InvalidKError: If k_values is empty or contains k < 1 (repeated k
            values are evaluated once)
        ValueError: If training_set or samples is empty
    """
    ks = _validate_k_values(k_values)
    if not training_set:
        raise ValueError("training_set must not be empty")
    if not samples:
        raise ValueError("samples must not be empty")

    for k in ks:
        if k > len(training_set):
            logger.warning(
                "k=%d exceeds training set size %d; voting over all neighbors",
                k,
                len(training_set),
            )

    report = ClassificationReport(
        k_values=ks,
        n_samples=len(samples),
        misclassified={k: 0 for k in ks},
        metric=metric,
    )

    # The training set is fixed for the run; stack it once, rank per sample.
    matrix = stack_vectors(training_set)
    labels = np.array([c.label for c in training_set], dtype=int)

    for sample in samples:
        votes = _votes(labels, matrix, sample, ks, metric)
        for k, label in votes.items():
            if label != sample.label:
                report.misclassified[k] += 1
        if on_sample is not None:
            on_sample(sample, votes)

    for k in ks:
        logger.info("k=%d accuracy %.2f%%", k, report.accuracy(k))
    return report
