from pathlib import Path
from typing import Tuple, Union
import logging

import numpy as np

from models.errors import DimensionMismatchError
from models.pixel_buffer import PixelBuffer, RED, GREEN, BLUE, to_samples
from repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


class ImageService:
    """
    Geometry and channel operations on PixelBuffer values.
    Every operation returns a *new* buffer; inputs are never touched.
    """
    def __init__(self, image_repository: ImageRepository = None):
        self.image_repository = image_repository or ImageRepository()

    # ─── I/O (delegated) ──────────────────────────────────────────
    def create_image(self, pixels) -> PixelBuffer:
        return PixelBuffer(pixels)

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        """Load a single image from disk into a PixelBuffer."""
        return self.image_repository.load(path)

    def save(self, image: PixelBuffer, path: Union[str, Path]) -> None:
        self.image_repository.save(image, path)

    # ─── Accessors ────────────────────────────────────────────────
    @staticmethod
    def get_value(image: PixelBuffer, row: int, col: int, channel: int) -> int:
        return image.get(row, col, channel)

    @staticmethod
    def get_image_dimensions(image: PixelBuffer) -> Tuple[int, int]:
        return image.height, image.width

    # ─── Point operations ─────────────────────────────────────────
    @staticmethod
    def brighten(image: PixelBuffer, delta: int) -> PixelBuffer:
        """Add *delta* to every sample (negative darkens), clamped to [0, 255]."""
        shifted = image.pixels.astype(np.int64) + int(delta)
        return PixelBuffer(np.clip(shifted, 0, 255))

    @staticmethod
    def flip_horizontal(image: PixelBuffer) -> PixelBuffer:
        return PixelBuffer(image.pixels[:, ::-1])

    @staticmethod
    def flip_vertical(image: PixelBuffer) -> PixelBuffer:
        return PixelBuffer(image.pixels[::-1])

    # ─── Channel isolation ────────────────────────────────────────
    @staticmethod
    def _isolate(image: PixelBuffer, channel: int) -> PixelBuffer:
        out = np.zeros_like(image.pixels)
        out[..., channel] = image.pixels[..., channel]
        return PixelBuffer(out)

    def red_component(self, image: PixelBuffer) -> PixelBuffer:
        return self._isolate(image, RED)

    def green_component(self, image: PixelBuffer) -> PixelBuffer:
        return self._isolate(image, GREEN)

    def blue_component(self, image: PixelBuffer) -> PixelBuffer:
        return self._isolate(image, BLUE)

    def split_rgb(self, image: PixelBuffer) -> Tuple[PixelBuffer, PixelBuffer, PixelBuffer]:
        """Three buffers, each keeping a single channel of *image*."""
        return (
            self._isolate(image, RED),
            self._isolate(image, GREEN),
            self._isolate(image, BLUE),
        )

    @staticmethod
    def combine(red: PixelBuffer, green: PixelBuffer, blue: PixelBuffer) -> PixelBuffer:
        """
        Build a new image from the R channel of *red*, the G channel of
        *green* and the B channel of *blue*.

        Raises:
            DimensionMismatchError: if the three sources differ in size.
        """
        if not (red.same_size(green) and green.same_size(blue)):
            raise DimensionMismatchError(
                f"Cannot combine images of sizes "
                f"{red.height}x{red.width}, {green.height}x{green.width}, {blue.height}x{blue.width}"
            )
        out = np.empty_like(red.pixels)
        out[..., RED] = red.pixels[..., RED]
        out[..., GREEN] = green.pixels[..., GREEN]
        out[..., BLUE] = blue.pixels[..., BLUE]
        return PixelBuffer(out)

    # ─── Grayscale projections ────────────────────────────────────
    @staticmethod
    def _gray(values: np.ndarray) -> PixelBuffer:
        return PixelBuffer(np.repeat(values[..., np.newaxis], 3, axis=2))

    def value_component(self, image: PixelBuffer) -> PixelBuffer:
        """Every channel becomes max(R, G, B)."""
        return self._gray(image.pixels.max(axis=2))

    def intensity_component(self, image: PixelBuffer) -> PixelBuffer:
        """Every channel becomes (R + G + B) // 3, truncated."""
        return self._gray(image.pixels.astype(np.int64).sum(axis=2) // 3)

    def luma_component(self, image: PixelBuffer) -> PixelBuffer:
        """Every channel becomes round(0.2126 R + 0.7152 G + 0.0722 B)."""
        px = image.pixels.astype(np.float64)
        luma = (LUMA_WEIGHTS[0] * px[..., RED]
                + LUMA_WEIGHTS[1] * px[..., GREEN]
                + LUMA_WEIGHTS[2] * px[..., BLUE])
        return self._gray(to_samples(luma))

    # ─── Tone ─────────────────────────────────────────────────────
    @staticmethod
    def sepia(image: PixelBuffer) -> PixelBuffer:
        px = image.pixels.astype(np.float64)
        r, g, b = px[..., RED], px[..., GREEN], px[..., BLUE]
        out = np.stack([m[0] * r + m[1] * g + m[2] * b for m in SEPIA_MATRIX], axis=2)
        return PixelBuffer(to_samples(out))
