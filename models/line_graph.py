# models/line_graph.py
"""
Draws 2D line graphs into RGB rasters with OpenCV.

• White background with a translucent light-grey grid.
• One polyline per data column, points (x, height − top_margin − y).
"""
from __future__ import annotations
import os
from typing import Sequence, Tuple

import cv2
import numpy as np
from dotenv import load_dotenv

from models.pixel_buffer import PixelBuffer

load_dotenv()

WHITE = (255, 255, 255)
GRID_GREY = (192, 192, 192)
LINE_COLOURS: Tuple[Tuple[int, int, int], ...] = (
    (255, 0, 0),   # red
    (0, 255, 0),   # green
    (0, 0, 255),   # blue
)
# cv2 works in int32 pixel coordinates
_MAX_COORD = 1 << 20


class LineGraph:

    def __init__(self,
                 vertical_lines: int = 10,
                 horizontal_lines: int = 10,
                 top_margin: int = 1,
                 grid_alpha: float = None):
        self.vertical_lines = vertical_lines
        self.horizontal_lines = horizontal_lines
        self.top_margin = top_margin
        self.grid_alpha = grid_alpha if grid_alpha is not None else float(
            os.getenv("HISTOGRAM_GRID_ALPHA", "0.37"))

    # ---------- private helpers ----------
    def _draw_grid(self, canvas: np.ndarray) -> np.ndarray:
        height, width = canvas.shape[:2]
        overlay = canvas.copy()

        step_x = width // self.vertical_lines
        for i in range(1, self.vertical_lines + 1):
            x = i * step_x
            cv2.line(overlay, (x, 0), (x, height), GRID_GREY, 1)

        step_y = height // self.horizontal_lines
        for i in range(1, self.horizontal_lines):
            y = i * step_y
            cv2.line(overlay, (0, y), (width, y), GRID_GREY, 1)

        return cv2.addWeighted(overlay, self.grid_alpha, canvas, 1 - self.grid_alpha, 0)

    def _draw_lines(self, canvas: np.ndarray, data: np.ndarray) -> None:
        height, width = canvas.shape[:2]
        points = min(width, data.shape[0])
        ys = height - self.top_margin - np.clip(data, -_MAX_COORD, _MAX_COORD).astype(np.int64)

        for x in range(points - 1):
            for c in range(data.shape[1]):
                colour = LINE_COLOURS[c % len(LINE_COLOURS)]
                cv2.line(canvas, (x, int(ys[x, c])), (x + 1, int(ys[x + 1, c])), colour, 1)

    # ---------- public API ----------
    def draw(self, data: Sequence, height: int, width: int) -> PixelBuffer:
        """
        Args
        ----
        data   : (N, channels) plot heights, row index = x position
        height : raster height
        width  : raster width

        Returns
        -------
        PixelBuffer (height, width) with the plotted graph
        """
        data = np.asarray(data)
        if data.ndim != 2:
            raise ValueError(f"Line graph data must be 2D, got shape {data.shape}")

        canvas = np.full((height, width, 3), WHITE, dtype=np.uint8)
        canvas = self._draw_grid(canvas)
        self._draw_lines(canvas, data)
        return PixelBuffer(canvas)
