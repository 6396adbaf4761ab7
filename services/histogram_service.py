import logging
from typing import Tuple

import numpy as np

from models.histogram import Histogram, NUM_LEVELS
from models.line_graph import LineGraph
from models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Near-black / near-white samples are usually clipped and would skew the peaks
PEAK_MIN_VALUE = 11
PEAK_MAX_VALUE = 244

# Histogram rasters are always one column per intensity
GRAPH_SIZE = NUM_LEVELS


class HistogramService:
    """
    Histogram construction, peak alignment (colour correction) and the
    line-graph rendering of a histogram.
    """

    def __init__(self, line_graph: LineGraph = None):
        self.line_graph = line_graph or LineGraph()

    # ─── Analysis ─────────────────────────────────────────────────
    @staticmethod
    def histogram(image: PixelBuffer) -> Histogram:
        """Count occurrences of each intensity 0..255, per channel."""
        flat = image.pixels.reshape(-1, 3)
        freq = np.stack(
            [np.bincount(flat[:, c], minlength=NUM_LEVELS) for c in range(3)],
            axis=1,
        )
        return Histogram(freq)

    @staticmethod
    def channel_peaks(histogram: Histogram,
                      min_value: int = PEAK_MIN_VALUE,
                      max_value: int = PEAK_MAX_VALUE) -> Tuple[int, int, int]:
        """
        Intensity of the highest frequency per channel within
        [min_value, max_value]. Ties go to the lowest intensity; a channel
        with no samples in range peaks at 0.
        """
        window = histogram.frequencies[min_value:max_value + 1]
        peaks = []
        for c in range(3):
            column = window[:, c]
            if column.max() > 0:
                # argmax returns the first occurrence
                peaks.append(min_value + int(np.argmax(column)))
            else:
                peaks.append(0)
        return tuple(peaks)

    def color_correct(self, image: PixelBuffer) -> PixelBuffer:
        """Shift each channel so its histogram peak lines up with the average peak."""
        peaks = self.channel_peaks(self.histogram(image))
        aligned = sum(peaks) // 3
        offsets = np.array([aligned - p for p in peaks], dtype=np.int64)
        logger.debug(f"Colour correction peaks={peaks} aligned={aligned} offsets={offsets.tolist()}")

        corrected = image.pixels.astype(np.int64) + offsets
        return PixelBuffer(np.clip(corrected, 0, 255))

    # ─── Rendering ────────────────────────────────────────────────
    def normalize(self, histogram: Histogram, scale: int = None) -> np.ndarray:
        """
        Scale frequencies so the tallest non-boundary bin reaches *scale*.
        Intensities 0 and 255 are ignored when picking the maximum, as
        clamped pixels pile up there.
        """
        if scale is None:
            scale = GRAPH_SIZE - 1
        freq = histogram.frequencies
        max_frequency = int(freq[1:NUM_LEVELS - 1].max())
        if max_frequency == 0:
            # image made only of 0/255 samples
            max_frequency = int(freq.max())
        if max_frequency == 0:
            return np.zeros_like(freq)
        return (freq * (scale / max_frequency)).astype(np.int64)

    def render_histogram(self, histogram: Histogram) -> PixelBuffer:
        """Draw the histogram as a graph_size × graph_size line graph."""
        data = self.normalize(histogram)
        return self.line_graph.draw(data, GRAPH_SIZE, GRAPH_SIZE)

    def histogram_image(self, image: PixelBuffer) -> PixelBuffer:
        return self.render_histogram(self.histogram(image))
