from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence, Union
import numpy as np

from models.errors import InvalidRangeError

NUM_CHANNELS = 3
MAX_SAMPLE = 255

RED, GREEN, BLUE = 0, 1, 2


def round_half_up(values):
    """
    Round to the nearest integer with halves going up (2.5 → 3, -2.5 → -2).
    Works on scalars and numpy arrays alike.
    """
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def to_samples(values) -> np.ndarray:
    """Round, clamp to [0, 255] and cast to uint8."""
    return np.clip(round_half_up(values), 0, MAX_SAMPLE).astype(np.uint8)


@dataclass(eq=False)
class PixelBuffer:
    """
    Simple data object: H×W RGB samples, every value in [0, 255].

    The array is copied on construction and marked read-only, so two
    buffers never share mutable storage. No image processing in here,
    that lives in services/.
    """
    pixels: Union[np.ndarray, Sequence] # Shape (H, W, 3), RGB order.
    _frozen: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.ndim != 3 or arr.shape[2] != NUM_CHANNELS:
            raise InvalidRangeError(f"Expected (height, width, 3) samples, got shape {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidRangeError("Image must have at least one row and one column")
        if arr.dtype != np.uint8:
            if arr.dtype.kind not in "iuf":
                raise InvalidRangeError(f"Samples must be numeric, got dtype {arr.dtype}")
            if arr.min() < 0 or arr.max() > MAX_SAMPLE:
                raise InvalidRangeError("Samples must be within [0, 255]")
            if arr.dtype.kind == "f" and not np.all(arr == np.floor(arr)):
                raise InvalidRangeError("Samples must be whole numbers")

        copied = np.array(arr, dtype=np.uint8, copy=True)
        copied.setflags(write=False)
        self.pixels = copied
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"PixelBuffer is immutable, cannot set '{name}'")
        super().__setattr__(name, value)

    # ─── Accessors ────────────────────────────────────────────────
    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def shape(self):
        return self.pixels.shape

    def get(self, row: int, col: int, channel: int) -> int:
        """
        Return one sample.

        Raises:
            IndexError: if row, col or channel is negative or past its bound.
        """
        if row < 0 or col < 0 or channel < 0:
            raise IndexError(f"Negative pixel index ({row}, {col}, {channel})")
        if row >= self.height or col >= self.width or channel >= NUM_CHANNELS:
            raise IndexError(
                f"Pixel index ({row}, {col}, {channel}) out of bounds "
                f"for {self.height}x{self.width} image"
            )
        return int(self.pixels[row, col, channel])

    def same_size(self, other: "PixelBuffer") -> bool:
        return self.height == other.height and self.width == other.width

    def to_list(self) -> List[List[List[int]]]:
        """Plain nested [row][col][channel] ints, for codecs and views."""
        return self.pixels.tolist()

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self):
        return f"PixelBuffer(height={self.height}, width={self.width})"
