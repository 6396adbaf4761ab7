from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from models.errors import InvalidRangeError


@dataclass(frozen=True, eq=False)
class FilterKernel:
    """
    Value-object holding a square convolution kernel of odd side length.
    Weights are stored read-only as float64.
    """
    name: str
    weights: np.ndarray

    def __post_init__(self):
        w = np.array(self.weights, dtype=np.float64, copy=True)
        if w.ndim != 2 or w.shape[0] != w.shape[1]:
            raise InvalidRangeError(f"Kernel '{self.name}' must be square, got shape {w.shape}")
        if w.shape[0] % 2 == 0:
            raise InvalidRangeError(f"Kernel '{self.name}' must have an odd side length")
        w.setflags(write=False)
        object.__setattr__(self, "weights", w)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def radius(self) -> int:
        return self.size // 2

    @classmethod
    def normalised(cls, name: str, weights) -> "FilterKernel":
        """Build a kernel whose weights are divided by their sum."""
        w = np.asarray(weights, dtype=np.float64)
        return cls(name, w / w.sum())


# 3×3 low-pass, centre weight is 1/4 of the total
GAUSSIAN_BLUR = FilterKernel(
    "gaussian-blur",
    np.array([
        [1, 2, 1],
        [2, 4, 2],
        [1, 2, 1],
    ]) / 16.0,
)

# 5×5 edge enhancer: negative outer ring, positive 3×3 core, weights sum to 1
SHARPEN = FilterKernel.normalised(
    "sharpen",
    np.array([
        [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
        [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
        [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
        [-1 / 8,  1 / 4,  1 / 4,  1 / 4, -1 / 8],
        [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
    ]),
)
