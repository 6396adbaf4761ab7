"""
Tests for the three-point levels adjustment.
"""

import numpy as np
import pytest

from models.errors import InvalidRangeError
from models.pixel_buffer import PixelBuffer
from services.levels_service import LevelsService


@pytest.fixture
def service() -> LevelsService:
    return LevelsService()


def curve(coeffs, x):
    a, b, c = coeffs
    return a * x ** 2 + b * x + c


def test_default_points_give_identity_curve(service):
    a, b, c = service.fit_curve(0, 128, 255)
    assert a == pytest.approx(0.0)
    assert b == pytest.approx(1.0)
    assert c == pytest.approx(0.0)


def test_identity_levels_leave_image_unchanged(service, random_image):
    assert service.adjust_levels(random_image, 0, 128, 255) == random_image


@pytest.mark.parametrize("black,mid,white", [(20, 100, 200), (0, 50, 255), (10, 200, 230)])
def test_curve_passes_through_points(service, black, mid, white):
    coeffs = service.fit_curve(black, mid, white)
    assert curve(coeffs, black) == pytest.approx(0.0, abs=1e-9)
    assert curve(coeffs, mid) == pytest.approx(128.0, abs=1e-9)
    assert curve(coeffs, white) == pytest.approx(255.0, abs=1e-9)


def test_adjust_maps_points_and_clamps(service):
    image = PixelBuffer([[(20, 100, 200), (0, 10, 255)]])
    out = service.adjust_levels(image, 20, 100, 200)
    assert out.to_list()[0][0] == [0, 128, 255]
    # below black → clamped to 0, above white → clamped to 255
    assert out.to_list()[0][1][0] == 0
    assert out.to_list()[0][1][2] == 255


def test_adjust_applies_rounded_curve(service, random_image):
    coeffs = service.fit_curve(30, 90, 220)
    expected = np.clip(np.floor(curve(coeffs, random_image.pixels.astype(float)) + 0.5), 0, 255)
    out = service.adjust_levels(random_image, 30, 90, 220)
    np.testing.assert_array_equal(out.pixels, expected)


@pytest.mark.parametrize("black,mid,white", [
    (50, 40, 60),
    (10, 10, 20),
    (10, 20, 20),
    (-1, 10, 20),
    (0, 10, 256),
    (200, 100, 50),
])
def test_invalid_levels(service, random_image, black, mid, white):
    with pytest.raises(InvalidRangeError):
        service.adjust_levels(random_image, black, mid, white)
