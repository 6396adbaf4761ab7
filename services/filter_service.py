import logging

import numpy as np

from models.filter_kernel import FilterKernel, GAUSSIAN_BLUR, SHARPEN
from models.pixel_buffer import PixelBuffer, to_samples

logger = logging.getLogger(__name__)


class FilterService:
    """
    Square-kernel 2D convolution over all three channels.

    Taps that fall outside the image are skipped (they contribute nothing);
    there is no wrapping and no edge replication. Results are rounded and
    clamped to [0, 255].
    """

    @staticmethod
    def convolve(image: PixelBuffer, kernel: FilterKernel) -> PixelBuffer:
        px = image.pixels.astype(np.float64)
        height, width = image.height, image.width
        r = kernel.radius
        acc = np.zeros_like(px)

        # Each kernel tap shifts the whole image; only the overlapping
        # window is accumulated, so out-of-range taps are simply skipped.
        for ki in range(-r, r + 1):
            src_r0, src_r1 = max(0, ki), min(height, height + ki)
            if src_r0 >= src_r1:
                continue
            dst_r0, dst_r1 = src_r0 - ki, src_r1 - ki
            for kj in range(-r, r + 1):
                src_c0, src_c1 = max(0, kj), min(width, width + kj)
                if src_c0 >= src_c1:
                    continue
                dst_c0, dst_c1 = src_c0 - kj, src_c1 - kj
                weight = kernel.weights[ki + r, kj + r]
                acc[dst_r0:dst_r1, dst_c0:dst_c1] += weight * px[src_r0:src_r1, src_c0:src_c1]

        logger.debug(f"Convolved {height}x{width} image with '{kernel.name}' ({kernel.size}x{kernel.size})")
        return PixelBuffer(to_samples(acc))

    def blur(self, image: PixelBuffer) -> PixelBuffer:
        return self.convolve(image, GAUSSIAN_BLUR)

    def sharpen(self, image: PixelBuffer) -> PixelBuffer:
        return self.convolve(image, SHARPEN)
