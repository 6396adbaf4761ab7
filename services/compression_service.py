from __future__ import annotations

import logging

import numpy as np

from models.errors import InvalidRangeError
from models.haar_wavelet import HaarWavelet, next_power_of_two
from models.pixel_buffer import PixelBuffer, round_half_up, to_samples

logger = logging.getLogger(__name__)


class CompressionService:
    """
    Lossy Haar-wavelet compression.

    *   Pads the image to an s×s grid (s = next power of two ≥ max side).
    *   Forward 2D Haar per channel.
    *   Zeroes every coefficient whose magnitude is below a threshold taken
        from the *distinct* magnitudes of all channels.
    *   Inverse 2D Haar, crop, round and clamp.
    """

    def __init__(self, wavelet: HaarWavelet = None):
        self.wavelet = wavelet or HaarWavelet()

    # ─── Steps ────────────────────────────────────────────────────
    @staticmethod
    def validate_ratio(ratio: float) -> None:
        if not 0 <= ratio <= 100:
            raise InvalidRangeError(f"Compression ratio must be within [0, 100], got {ratio}")

    @staticmethod
    def pad(image: PixelBuffer) -> np.ndarray:
        """Float (s, s, 3) grid holding the samples top-left, zeros elsewhere."""
        size = next_power_of_two(max(image.height, image.width))
        grid = np.zeros((size, size, 3), dtype=np.float64)
        grid[:image.height, :image.width] = image.pixels
        return grid

    def transform_coefficients(self, image: PixelBuffer) -> np.ndarray:
        """Padded grid after the forward 2D transform, channels transformed independently."""
        return self.wavelet.forward_2d(self.pad(image))

    @staticmethod
    def threshold_value(coefficients: np.ndarray, ratio: float) -> float:
        """
        Magnitude below which coefficients are dropped.

        Picked from the sorted *distinct* absolute values, not from every
        coefficient: idx = max(0, round(ratio/100 · count) − 1).
        """
        magnitudes = np.unique(np.abs(coefficients))  # sorted ascending
        count = magnitudes.size
        idx = max(0, int(round_half_up(ratio / 100 * count)) - 1)
        return float(magnitudes[min(idx, count - 1)])

    def threshold(self, coefficients: np.ndarray, ratio: float) -> np.ndarray:
        """Copy of *coefficients* with every |c| < threshold set to zero (ties kept)."""
        self.validate_ratio(ratio)
        limit = self.threshold_value(coefficients, ratio)
        out = np.array(coefficients, dtype=np.float64, copy=True)
        out[np.abs(out) < limit] = 0.0
        return out

    # ─── Public API ───────────────────────────────────────────────
    def compress(self, image: PixelBuffer, ratio: float) -> PixelBuffer:
        self.validate_ratio(ratio)

        coefficients = self.transform_coefficients(image)
        kept = self.threshold(coefficients, ratio)
        logger.debug(
            f"Haar compression {image.height}x{image.width} ratio={ratio}: "
            f"{np.count_nonzero(kept)}/{kept.size} coefficients kept"
        )

        restored = self.wavelet.inverse_2d(kept)
        return PixelBuffer(to_samples(restored[:image.height, :image.width]))
