# models/haar_wavelet.py
"""
Orthonormal Haar wavelet transform on square float grids.

• 1D step: pairwise averages then pairwise differences, both scaled by 1/√2.
• 2D forward: rows then columns of the top-left c×c block, c = s, s/2, …, 2.
• 2D inverse: columns then rows, c = 2, 4, …, s.

Grids are (s, s) or (s, s, channels) numpy arrays with s a power of two.
Every method returns a new array; inputs are never modified.
"""
from __future__ import annotations
import math
import numpy as np

SQRT2 = math.sqrt(2)


class HaarWavelet:

    # ---------- 1D ----------
    @staticmethod
    def forward_1d(values: np.ndarray) -> np.ndarray:
        """
        One Haar step along the last axis.
        [s0, s1, s2, s3] → [(s0+s1)/√2, (s2+s3)/√2, (s0−s1)/√2, (s2−s3)/√2]
        """
        values = np.asarray(values, dtype=np.float64)
        if values.shape[-1] % 2:
            raise ValueError(f"Haar step needs an even length, got {values.shape[-1]}")
        even = values[..., 0::2]
        odd = values[..., 1::2]
        return np.concatenate(((even + odd) / SQRT2, (even - odd) / SQRT2), axis=-1)

    @staticmethod
    def inverse_1d(values: np.ndarray) -> np.ndarray:
        """Undo forward_1d along the last axis."""
        values = np.asarray(values, dtype=np.float64)
        n = values.shape[-1]
        if n % 2:
            raise ValueError(f"Haar step needs an even length, got {n}")
        avg = values[..., : n // 2]
        diff = values[..., n // 2:]
        out = np.empty_like(values)
        out[..., 0::2] = (avg + diff) / SQRT2
        out[..., 1::2] = (avg - diff) / SQRT2
        return out

    # ---------- 2D ----------
    @staticmethod
    def _check_square(grid: np.ndarray) -> int:
        size = grid.shape[0]
        if grid.ndim < 2 or grid.shape[1] != size:
            raise ValueError(f"Haar grid must be square, got shape {grid.shape}")
        if size < 1 or size & (size - 1):
            raise ValueError(f"Haar grid side must be a power of two, got {size}")
        return size

    @classmethod
    def _rows(cls, block: np.ndarray, step) -> np.ndarray:
        # block is (c, c[, ch]); move the column axis last for the 1D step
        return np.moveaxis(step(np.moveaxis(block, 1, -1)), -1, 1)

    @classmethod
    def _cols(cls, block: np.ndarray, step) -> np.ndarray:
        return np.moveaxis(step(np.moveaxis(block, 0, -1)), -1, 0)

    @classmethod
    def forward_2d(cls, grid: np.ndarray) -> np.ndarray:
        grid = np.array(grid, dtype=np.float64, copy=True)
        c = cls._check_square(grid)
        while c > 1:
            grid[:c, :c] = cls._rows(grid[:c, :c], cls.forward_1d)
            grid[:c, :c] = cls._cols(grid[:c, :c], cls.forward_1d)
            c //= 2
        return grid

    @classmethod
    def inverse_2d(cls, grid: np.ndarray) -> np.ndarray:
        grid = np.array(grid, dtype=np.float64, copy=True)
        size = cls._check_square(grid)
        c = 2
        while c <= size:
            grid[:c, :c] = cls._cols(grid[:c, :c], cls.inverse_1d)
            grid[:c, :c] = cls._rows(grid[:c, :c], cls.inverse_1d)
            c *= 2
        return grid


def next_power_of_two(n: int) -> int:
    """Smallest power of two ≥ n (n ≥ 1)."""
    if n < 1:
        raise ValueError(f"Expected a positive size, got {n}")
    return 1 << (n - 1).bit_length()
