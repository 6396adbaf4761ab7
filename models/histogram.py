from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from models.errors import InvalidRangeError

NUM_LEVELS = 256


@dataclass(eq=False)
class Histogram:
    """
    Frequency table: one row per intensity 0..255, one column per channel.
    """
    frequencies: np.ndarray # Shape (256, 3), integer counts.

    def __post_init__(self):
        freq = np.array(self.frequencies, dtype=np.int64, copy=True)
        if freq.shape != (NUM_LEVELS, 3):
            raise InvalidRangeError(f"Histogram must have shape (256, 3), got {freq.shape}")
        if freq.min() < 0:
            raise InvalidRangeError("Histogram frequencies cannot be negative")
        freq.setflags(write=False)
        self.frequencies = freq

    def frequency(self, value: int, channel: int) -> int:
        return int(self.frequencies[value, channel])

    def channel(self, channel: int) -> np.ndarray:
        return self.frequencies[:, channel]

    @property
    def total(self) -> int:
        """Number of samples counted in one channel (= pixel count)."""
        return int(self.frequencies[:, 0].sum())

    def __eq__(self, other):
        if not isinstance(other, Histogram):
            return NotImplemented
        return np.array_equal(self.frequencies, other.frequencies)

    __hash__ = None
