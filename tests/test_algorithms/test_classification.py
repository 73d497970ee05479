"""
Tests for KNN classification and accuracy reporting.
"""

import numpy as np
import pytest

from study_digits.algorithms import classification
from study_digits.algorithms.classification import (
    ClassificationReport,
    classify,
    majority_vote,
    vote_for_k_values,
)
from study_digits.errors import InvalidKError
from study_digits.models import LabeledVector


# ------------------------------------------------------------------
# majority_vote
# ------------------------------------------------------------------


def test_majority_vote_clear_winner():
    assert majority_vote([3, 1, 1, 2, 1]) == 1


def test_majority_vote_tie_goes_to_first_seen():
    """Among tied labels the one nearest the front of the list wins."""
    assert majority_vote([7, 2, 2, 7]) == 7
    assert majority_vote([2, 7, 7, 2]) == 2
    assert majority_vote([9, 4, 5]) == 9


def test_majority_vote_empty():
    with pytest.raises(ValueError):
        majority_vote([])


# ------------------------------------------------------------------
# classify
# ------------------------------------------------------------------


def test_end_to_end_toy_scenario(toy_training_set):
    sample = LabeledVector(0, np.array([0, 2]))

    report = classify(toy_training_set, [sample], [1], "euclidean")

    assert report.misclassified == {1: 0}
    assert report.accuracy(1) == 100.0
    assert vote_for_k_values(toy_training_set, sample, [1]) == {1: 0}


def test_multiple_k_values_in_one_pass(vectors_from):
    training = vectors_from([
        (1, [1, 0]),
        (2, [2, 0]),
        (2, [3, 0]),
        (1, [10, 0]),
        (1, [11, 0]),
    ])
    sample = LabeledVector(1, np.array([0, 0]))

    votes = vote_for_k_values(training, sample, [1, 3, 5])

    assert votes == {1: 1, 3: 2, 5: 1}


def test_ranking_computed_once_per_sample(monkeypatch, vectors_from):
    training = vectors_from([(0, [0, 0]), (1, [5, 5]), (0, [1, 1])])
    samples = vectors_from([(0, [0, 1]), (1, [6, 6])])
    calls = []
    original = classification.rank_rows

    def counting(matrix, query, metric):
        calls.append(query)
        return original(matrix, query, metric)

    monkeypatch.setattr(classification, "rank_rows", counting)

    classify(training, samples, [1, 2, 3])

    assert calls == samples


def test_training_set_stacked_once_per_run(monkeypatch, blobs):
    stacked = []
    original = classification.stack_vectors

    def counting(items):
        stacked.append(len(items))
        return original(items)

    monkeypatch.setattr(classification, "stack_vectors", counting)

    report = classify(blobs[:30], blobs[30:], [1, 3])

    assert stacked == [30]
    assert report.accuracies() == {1: 100.0, 3: 100.0}


def test_duplicate_k_values_reported_once(vectors_from):
    training = vectors_from([(0, [0, 0]), (1, [10, 10])])
    samples = vectors_from([(0, [1, 1])])

    report = classify(training, samples, [3, 1, 3, 1])

    assert report.k_values == [3, 1]
    assert report.format().count("k=1:") == 1


def test_accuracy_percentages(vectors_from):
    training = vectors_from([(0, [0, 0]), (1, [10, 10])])
    samples = vectors_from([
        (0, [1, 1]),
        (0, [2, 2]),
        (1, [9, 9]),
        (1, [1, 0]),  # misclassified at k=1
        (0, [8, 8]),  # misclassified at k=1
        (0, [0, 1]),
    ])

    report = classify(training, samples, [1])

    assert report.misclassified[1] == 2
    assert report.accuracy(1) == pytest.approx(66.67)


def test_k_larger_than_training_set_votes_over_everything(vectors_from):
    training = vectors_from([(0, [0, 0]), (1, [5, 0]), (1, [6, 0])])
    sample = LabeledVector(0, np.array([0, 0]))

    report = classify(training, [sample], [10])

    assert report.misclassified[10] == 1


def test_on_sample_callback(blobs):
    seen = []

    classify(blobs[:30], blobs[30:], [1, 3], on_sample=lambda s, votes: seen.append(votes))

    assert len(seen) == 30
    assert all(set(v) == {1, 3} for v in seen)


def test_separable_blobs_classify_perfectly(blobs):
    report = classify(blobs[:30], blobs[30:], [1, 3, 5], "manhattan")
    assert report.accuracies() == {1: 100.0, 3: 100.0, 5: 100.0}


def test_validation(toy_training_set):
    sample = LabeledVector(0, np.array([0, 2]))
    with pytest.raises(InvalidKError):
        classify(toy_training_set, [sample], [])
    with pytest.raises(InvalidKError):
        classify(toy_training_set, [sample], [1, 0])
    with pytest.raises(ValueError):
        classify(toy_training_set, [], [1])
    with pytest.raises(ValueError):
        classify([], [sample], [1])


# ------------------------------------------------------------------
# ClassificationReport
# ------------------------------------------------------------------


def test_report_format():
    report = ClassificationReport(k_values=[1, 3], n_samples=3, misclassified={1: 1, 3: 0})

    text = report.format()

    assert "k=1: 66.67%" in text
    assert "k=3: 100.00%" in text


def test_report_without_samples():
    report = ClassificationReport(k_values=[1], n_samples=0)
    with pytest.raises(ZeroDivisionError):
        report.accuracy(1)
