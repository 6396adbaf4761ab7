import logging
from typing import Callable

import numpy as np

from models.errors import DimensionMismatchError, InvalidRangeError
from models.pixel_buffer import PixelBuffer, round_half_up

logger = logging.getLogger(__name__)


class SplitViewService:
    """
    Side-by-side previews: the left part of one image next to the right
    part of another, cut along a vertical line.
    """

    @staticmethod
    def split_column(width: int, ratio: float) -> int:
        return int(round_half_up(width * ratio / 100))

    def split_view(self, base: PixelBuffer, overlay: PixelBuffer, ratio: float) -> PixelBuffer:
        """
        Columns [0, split) come from *base*, columns [split, width) from *overlay*.

        Raises:
            InvalidRangeError: ratio outside [0, 100].
            DimensionMismatchError: base and overlay differ in size.
        """
        if not 0 <= ratio <= 100:
            raise InvalidRangeError(f"Split ratio must be within [0, 100], got {ratio}")
        if not base.same_size(overlay):
            raise DimensionMismatchError(
                f"Split view needs equal sizes, got {base.height}x{base.width} "
                f"and {overlay.height}x{overlay.width}"
            )

        split = self.split_column(base.width, ratio)
        out = np.array(overlay.pixels)
        out[:, :split] = base.pixels[:, :split]
        return PixelBuffer(out)

    def preview(self,
                source: PixelBuffer,
                operation: Callable[[PixelBuffer], PixelBuffer],
                ratio: float) -> PixelBuffer:
        """
        Apply *operation* to *source* and show the result on the left,
        the untouched source on the right.
        """
        if not 0 <= ratio <= 100:
            raise InvalidRangeError(f"Split ratio must be within [0, 100], got {ratio}")
        transformed = operation(source)
        return self.split_view(transformed, source, ratio)
