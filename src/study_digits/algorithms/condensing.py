"""
Condensed nearest neighbor reduction of a labeled training set.

Starting from a single seed, points that the current condensed set
misclassifies under 1-NN are absorbed until a full pass absorbs nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..models import LabeledVector
from ..utils.logging_config import get_logger
from .distance import DEFAULT_METRIC
from .neighbors import nearest

logger = get_logger(__name__)

PassCallback = Callable[[int, int, int, int], None]
CondensedSink = Callable[[List[LabeledVector]], None]


@dataclass
class CondenseResult:
    """Outcome of a condensing run."""

    condensed: List[LabeledVector] = field(default_factory=list)
    remaining: List[LabeledVector] = field(default_factory=list)
    passes: int = 0

    @property
    def total(self) -> int:
        return len(self.condensed) + len(self.remaining)


def absorb_pass(
    condensed: List[LabeledVector],
    candidates: Sequence[LabeledVector],
    metric: str = DEFAULT_METRIC,
) -> List[LabeledVector]:
    """
    Run one condensing pass.

    Each candidate is tested against the condensed set as it stands at that
    moment; a candidate whose nearest condensed neighbor carries another label
    is appended to *condensed*. Candidates are visited in a snapshot of their
    order at the start of the pass.

    Args:
        condensed: Condensed set, extended in place
        candidates: Points to test
        metric: Distance metric

    Returns:
        The absorbed candidates in discovery order
    """
    moved: List[LabeledVector] = []
    for candidate in list(candidates):
        if not condensed:
            condensed.append(candidate)
            moved.append(candidate)
            continue
        neighbor = nearest(1, condensed, candidate, metric)[0]
        if neighbor.label != candidate.label:
            condensed.append(candidate)
            moved.append(candidate)
    return moved


def condense(
    training_set: Sequence[LabeledVector],
    *,
    metric: str = DEFAULT_METRIC,
    on_pass: Optional[PassCallback] = None,
    sink: Optional[CondensedSink] = None,
) -> CondenseResult:
    """
    Reduce *training_set* to a subset consistent under 1-NN.

    Algorithm:
    1. Move the first element into the condensed set.
    2. Pass over the remaining elements with ``absorb_pass``; absorbed
       elements leave the remaining list once the pass is over.
    3. Stop after a pass that absorbs nothing. Every other pass shrinks the
       remaining list, so the loop terminates.

    Args:
        training_set: Labeled vectors to condense (not modified)
        metric: Distance metric for the 1-NN tests
        on_pass: Optional ``(pass_number, moved, condensed_size, remaining_size)``
            callback after each pass
        sink: Optional callable receiving the condensed list exactly once,
            on every exit path including interrupts

    Returns:
        CondenseResult with the condensed set in insertion order and the
        elements that were never absorbed
    """
    result = CondenseResult(remaining=list(training_set))
    try:
        if not result.remaining:
            return result

        result.condensed.append(result.remaining.pop(0))

        while True:
            result.passes += 1
            moved = absorb_pass(result.condensed, result.remaining, metric)
            if moved:
                moved_ids = {id(item) for item in moved}
                result.remaining = [
                    item for item in result.remaining if id(item) not in moved_ids
                ]

            logger.info(
                "Condensing pass %d: moved %d, condensed %d, remaining %d",
                result.passes,
                len(moved),
                len(result.condensed),
                len(result.remaining),
            )
            if on_pass is not None:
                on_pass(result.passes, len(moved), len(result.condensed), len(result.remaining))

            if not moved:
                break

        return result
    finally:
        if sink is not None:
            sink(list(result.condensed))
