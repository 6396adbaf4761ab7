import logging
from typing import Tuple

import numpy as np

from models.errors import InvalidRangeError
from models.pixel_buffer import PixelBuffer, to_samples

logger = logging.getLogger(__name__)


class LevelsService:
    """
    Three-point levels adjustment: a quadratic tone curve through
    (black, 0), (mid, 128) and (white, 255), applied to every sample.
    """

    @staticmethod
    def validate(black: int, mid: int, white: int) -> None:
        if not (0 <= black < mid < white <= 255):
            raise InvalidRangeError(
                f"Levels must satisfy 0 <= black < mid < white <= 255, "
                f"got black={black}, mid={mid}, white={white}"
            )

    @classmethod
    def fit_curve(cls, black: int, mid: int, white: int) -> Tuple[float, float, float]:
        """Coefficients (A, B, C) of y = A·x² + B·x + C."""
        cls.validate(black, mid, white)
        b, m, w = int(black), int(mid), int(white)

        denom = (b * b) * (m - w) - b * (m * m - w * w) + w * m * m - m * w * w
        num_a = 127 * b + 128 * w - 255 * m
        num_b = -127 * b * b + 255 * m * m - 128 * w * w
        num_c = (b * b) * (255 * m - 128 * w) - b * (255 * m * m - 128 * w * w)

        denom = float(denom)
        return num_a / denom, num_b / denom, num_c / denom

    def adjust_levels(self, image: PixelBuffer, black: int, mid: int, white: int) -> PixelBuffer:
        coeff_a, coeff_b, coeff_c = self.fit_curve(black, mid, white)
        logger.debug(f"Levels curve A={coeff_a:.6g} B={coeff_b:.6g} C={coeff_c:.6g}")

        # Same curve for every sample value, so evaluate it once per level
        x = np.arange(256, dtype=np.float64)
        lut = to_samples(coeff_a * x ** 2 + coeff_b * x + coeff_c)
        return PixelBuffer(lut[image.pixels])
