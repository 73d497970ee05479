"""
Render a pixel vector as a grayscale image for inspection.
"""

from pathlib import Path
from typing import Tuple, Union

import numpy as np
import matplotlib
matplotlib.use("Agg")  # No display; save only
import matplotlib.pyplot as plt

from ..errors import DimensionMismatchError
from ..models import IMAGE_SHAPE, LabeledVector, VectorLike, as_vector


def vector_to_image(
    item: Union[LabeledVector, VectorLike], shape: Tuple[int, int] = IMAGE_SHAPE
) -> np.ndarray:
    """Reshape a pixel vector into a row-major uint8 image of *shape*."""
    vector = as_vector(item)
    expected = shape[0] * shape[1]
    if vector.size != expected:
        raise DimensionMismatchError(expected, vector.size)
    return np.clip(vector, 0, 255).astype(np.uint8).reshape(shape)


def render_vector(
    item: Union[LabeledVector, VectorLike],
    path: Union[str, Path],
    *,
    shape: Tuple[int, int] = IMAGE_SHAPE,
) -> Path:
    """Save a pixel vector as a grayscale PNG (0 black, 255 white)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(path, vector_to_image(item, shape), cmap="gray", vmin=0, vmax=255)
    return path
