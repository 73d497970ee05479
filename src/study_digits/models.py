"""
Core record type shared by the classification and clustering code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from .errors import DimensionMismatchError

VECTOR_DIMENSION = 784
IMAGE_SHAPE = (28, 28)

VectorLike = Union[np.ndarray, Sequence[float]]


@dataclass(eq=False)
class LabeledVector:
    """
    One dataset row: a label, its pixel vector and the cluster it was last
    assigned to.

    ``label`` and ``vector`` are fixed after construction (the array is made
    read-only). ``cluster`` is written by k-means on every assignment pass.
    Records compare by identity, so duplicate rows stay distinct.
    """

    label: int
    vector: np.ndarray
    cluster: Optional[int] = field(default=None)

    def __post_init__(self):
        vector = np.array(self.vector)
        if vector.ndim != 1:
            raise ValueError(f"vector must be one-dimensional, got shape {vector.shape}")
        vector.setflags(write=False)
        self.vector = vector
        self.label = int(self.label)

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])


def as_vector(item: Union[LabeledVector, VectorLike]) -> np.ndarray:
    """Return the raw vector of a record, or *item* itself as an array."""
    if isinstance(item, LabeledVector):
        return item.vector
    return np.asarray(item)


def stack_vectors(items: Sequence[LabeledVector]) -> np.ndarray:
    """
    Stack record vectors into an ``(n, d)`` float64 matrix.

    Raises:
        DimensionMismatchError: If the records do not share one length.
    """
    if not items:
        return np.empty((0, 0), dtype=np.float64)
    d = items[0].dimension
    for item in items:
        if item.dimension != d:
            raise DimensionMismatchError(d, item.dimension)
    return np.vstack([item.vector for item in items]).astype(np.float64)
