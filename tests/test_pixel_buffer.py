"""
Tests for the PixelBuffer value type.
"""

import numpy as np
import pytest

from models.errors import InvalidRangeError
from models.pixel_buffer import PixelBuffer, round_half_up, to_samples


class TestConstruction:

    def test_dimensions(self, random_image):
        assert random_image.height == 5
        assert random_image.width == 7
        assert random_image.shape == (5, 7, 3)

    def test_accepts_nested_lists(self, scenario_image):
        assert scenario_image.get(1, 1, 2) == 255
        assert scenario_image.pixels.dtype == np.uint8

    def test_defensive_copy(self):
        source = np.full((2, 2, 3), 10, dtype=np.uint8)
        image = PixelBuffer(source)
        source[0, 0, 0] = 99
        assert image.get(0, 0, 0) == 10

    def test_storage_is_read_only(self, random_image):
        with pytest.raises(ValueError):
            random_image.pixels[0, 0, 0] = 1

    def test_attributes_cannot_be_rebound(self, random_image):
        with pytest.raises(AttributeError):
            random_image.pixels = np.zeros((1, 1, 3), dtype=np.uint8)

    def test_two_buffers_never_share_storage(self, random_image):
        copy = PixelBuffer(random_image.pixels)
        assert copy == random_image
        assert not np.shares_memory(copy.pixels, random_image.pixels)

    @pytest.mark.parametrize("bad", [
        np.zeros((2, 2), dtype=np.uint8),
        np.zeros((2, 2, 4), dtype=np.uint8),
        np.zeros((0, 2, 3), dtype=np.uint8),
    ])
    def test_rejects_bad_shapes(self, bad):
        with pytest.raises(InvalidRangeError):
            PixelBuffer(bad)

    @pytest.mark.parametrize("value", [-1, 256, 1000])
    def test_rejects_out_of_range_samples(self, value):
        with pytest.raises(InvalidRangeError):
            PixelBuffer(np.full((1, 1, 3), value, dtype=np.int64))

    def test_rejects_fractional_samples(self):
        with pytest.raises(InvalidRangeError):
            PixelBuffer(np.full((1, 1, 3), 1.5))


class TestAccess:

    def test_get_returns_python_int(self, scenario_image):
        value = scenario_image.get(2, 1, 0)
        assert value == 255
        assert isinstance(value, int)

    @pytest.mark.parametrize("row,col,channel", [
        (-1, 0, 0), (0, -1, 0), (0, 0, -1),
        (3, 0, 0), (0, 3, 0), (0, 0, 3),
    ])
    def test_get_out_of_bounds(self, scenario_image, row, col, channel):
        with pytest.raises(IndexError):
            scenario_image.get(row, col, channel)

    def test_to_list(self):
        image = PixelBuffer([[(1, 2, 3), (4, 5, 6)]])
        assert image.to_list() == [[[1, 2, 3], [4, 5, 6]]]

    def test_equality(self, make_solid):
        assert make_solid(2, 3, (1, 2, 3)) == make_solid(2, 3, (1, 2, 3))
        assert make_solid(2, 3, (1, 2, 3)) != make_solid(3, 2, (1, 2, 3))
        assert make_solid(2, 3, (1, 2, 3)) != make_solid(2, 3, (1, 2, 4))


class TestRounding:

    def test_halves_round_up(self):
        np.testing.assert_array_equal(
            round_half_up([0.5, 1.5, 2.5, -0.5, 2.49]),
            [1.0, 2.0, 3.0, 0.0, 2.0],
        )

    def test_to_samples_clamps(self):
        np.testing.assert_array_equal(to_samples([-10.2, 0.4, 254.5, 300.0]), [0, 0, 255, 255])
        assert to_samples([1.0]).dtype == np.uint8
