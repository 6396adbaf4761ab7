import math

import numpy as np
import pytest

from models.haar_wavelet import HaarWavelet, next_power_of_two

SQRT2 = math.sqrt(2)


def test_forward_1d_averages_then_differences():
    out = HaarWavelet.forward_1d([1, 3, 5, 7])
    np.testing.assert_allclose(out, [4 / SQRT2, 12 / SQRT2, -2 / SQRT2, -2 / SQRT2])


def test_inverse_1d_undoes_forward():
    values = np.array([9.0, -2.0, 4.5, 0.0, 3.0, 3.0])
    np.testing.assert_allclose(HaarWavelet.inverse_1d(HaarWavelet.forward_1d(values)), values)


def test_odd_length_rejected():
    with pytest.raises(ValueError):
        HaarWavelet.forward_1d([1, 2, 3])


def test_forward_2d_of_constant_block_keeps_only_dc():
    grid = np.full((4, 4), 100.0)
    coeffs = HaarWavelet.forward_2d(grid)
    assert coeffs[0, 0] == pytest.approx(400.0)
    coeffs[0, 0] = 0.0
    np.testing.assert_allclose(coeffs, 0.0, atol=1e-9)


def test_forward_2d_rows_before_columns():
    grid = np.array([[1.0, 2.0], [3.0, 4.0]])
    # rows: [3, -1]/√2, [7, -1]/√2 ; columns then give [10, -2, -4, 0] / 2
    np.testing.assert_allclose(HaarWavelet.forward_2d(grid), [[5.0, -1.0], [-2.0, 0.0]])


def test_round_trip_per_channel():
    rng = np.random.default_rng(7)
    grid = rng.uniform(0, 255, size=(8, 8, 3))
    coeffs = HaarWavelet.forward_2d(grid)
    np.testing.assert_allclose(HaarWavelet.inverse_2d(coeffs), grid, atol=1e-9)


def test_channels_are_independent():
    rng = np.random.default_rng(3)
    grid = rng.uniform(0, 255, size=(4, 4, 3))
    coeffs = HaarWavelet.forward_2d(grid)
    np.testing.assert_allclose(coeffs[..., 1], HaarWavelet.forward_2d(grid[..., 1]))


def test_inputs_not_modified():
    grid = np.arange(16, dtype=np.float64).reshape(4, 4)
    before = grid.copy()
    HaarWavelet.forward_2d(grid)
    HaarWavelet.inverse_2d(grid)
    np.testing.assert_array_equal(grid, before)


def test_non_power_of_two_rejected():
    with pytest.raises(ValueError):
        HaarWavelet.forward_2d(np.zeros((6, 6)))
    with pytest.raises(ValueError):
        HaarWavelet.forward_2d(np.zeros((4, 8)))


@pytest.mark.parametrize("n,expected", [(1, 1), (2, 2), (3, 4), (5, 8), (8, 8), (9, 16), (600, 1024)])
def test_next_power_of_two(n, expected):
    assert next_power_of_two(n) == expected
