import numpy as np
import pytest

from models.pixel_buffer import PixelBuffer


@pytest.fixture
def scenario_image() -> PixelBuffer:
    """3×3 image mixing primaries, secondaries, black and white."""
    return PixelBuffer([
        [(255, 0, 0), (0, 255, 0), (0, 0, 255)],
        [(255, 255, 0), (255, 255, 255), (0, 0, 0)],
        [(0, 0, 0), (255, 0, 255), (0, 255, 255)],
    ])


@pytest.fixture
def random_image() -> PixelBuffer:
    """Seeded 5×7 image (non-square, non power of two)."""
    rng = np.random.default_rng(42)
    return PixelBuffer(rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8))


@pytest.fixture
def gradient_image() -> PixelBuffer:
    """8×16 horizontal gradient, different per channel."""
    pixels = np.zeros((8, 16, 3), dtype=np.uint8)
    for x in range(16):
        pixels[:, x, 0] = x * 16
        pixels[:, x, 1] = 255 - x * 16
        pixels[:, x, 2] = 128
    return PixelBuffer(pixels)


@pytest.fixture
def make_solid():
    """Factory for single-colour images."""
    def _solid(height: int, width: int, rgb) -> PixelBuffer:
        return PixelBuffer(np.full((height, width, 3), rgb, dtype=np.uint8))
    return _solid
