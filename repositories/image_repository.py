from pathlib import Path
from typing import Callable, Dict, Union
import logging
import os
import signal

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from models.errors import FileFormatError
from models.pixel_buffer import PixelBuffer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_ppm(path: Path) -> PixelBuffer:
    """Plain-text (P3) PPM. Lines starting with '#' are comments."""
    with open(path, "r", encoding="ascii", errors="replace") as fh:
        tokens = []
        for line in fh:
            if line.startswith("#"):
                continue
            tokens.extend(line.split("#", 1)[0].split())

    if not tokens or tokens[0] != "P3":
        raise FileFormatError(f"Not a plain PPM (P3) file: {path}")
    try:
        width, height, maxval = (int(t) for t in tokens[1:4])
        values = np.array([int(t) for t in tokens[4:]], dtype=np.int64)
    except ValueError as err:
        raise FileFormatError(f"Malformed PPM header or samples in {path}: {err}") from err

    if width <= 0 or height <= 0 or maxval <= 0:
        raise FileFormatError(f"Invalid PPM dimensions {width}x{height} (maxval {maxval}): {path}")
    if values.size < width * height * 3:
        raise FileFormatError(f"PPM has {values.size} samples, expected {width * height * 3}: {path}")

    pixels = values[: width * height * 3].reshape(height, width, 3)
    if pixels.min() < 0 or pixels.max() > maxval:
        raise FileFormatError(f"PPM samples exceed maxval {maxval}: {path}")
    if maxval != 255:
        pixels = np.floor(pixels * 255.0 / maxval + 0.5)
    return PixelBuffer(pixels)


def _write_ppm(image: PixelBuffer, path: Path) -> None:
    with open(path, "w", encoding="ascii") as fh:
        fh.write("P3\n")
        fh.write(f"{image.width} {image.height}\n")
        fh.write("255\n")
        for row in image.pixels:
            fh.write("\n".join(f"{r} {g} {b}" for r, g, b in row.tolist()))
            fh.write("\n")


class ImageRepository:
    """
    Handles file I/O for PixelBuffer values.
    Readers and writers are picked from a table keyed by file extension.
    """
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", ".ppm,.png,.jpg,.jpeg,.bmp").split(",")
            if ext.strip()
        }
        self.timeout = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))
        self.jpeg_quality = int(os.getenv("JPEG_QUALITY", "95"))

        self._readers: Dict[str, Callable[[Path], PixelBuffer]] = {".ppm": _read_ppm}
        self._writers: Dict[str, Callable[[PixelBuffer, Path], None]] = {".ppm": _write_ppm}
        for ext in (".png", ".jpg", ".jpeg", ".bmp"):
            self._readers[ext] = self._read_raster
            self._writers[ext] = self._write_raster

    # ─── helpers ──────────────────────────────────────────────────
    def _extension(self, path: Path) -> str:
        ext = path.suffix.lower()
        if ext not in self.VALID_EXTS or ext not in self._readers:
            raise FileFormatError(f"Unsupported image extension '{ext}': {path}")
        return ext

    def _read_raster(self, path: Path) -> PixelBuffer:
        # ─── timeout wrapper (5 s default) ────────────────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {self.timeout}s: {path}")

        use_alarm = hasattr(signal, "SIGALRM")
        if use_alarm:
            try:
                previous = signal.signal(signal.SIGALRM, _handler)
            except ValueError:
                # signals only work in the main thread
                use_alarm = False
        if use_alarm:
            signal.alarm(self.timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        finally:
            if use_alarm:
                signal.alarm(0)  # always disarm
                signal.signal(signal.SIGALRM, previous or signal.SIG_DFL)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise FileFormatError(f"Image could not be decoded: {path}")
        return PixelBuffer(arr_bgr[:, :, ::-1])

    def _write_raster(self, image: PixelBuffer, path: Path) -> None:
        pil_image = PILImage.fromarray(np.array(image.pixels))
        if path.suffix.lower() in (".jpg", ".jpeg"):
            pil_image.save(path, "JPEG", quality=self.jpeg_quality)
        else:
            pil_image.save(path)

    # ─── public API ───────────────────────────────────────────────
    def load(self, path: PathLike) -> PixelBuffer:
        path = Path(path)
        ext = self._extension(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        image = self._readers[ext](path)
        logger.info(f"Loaded {path.name}: {image.height}x{image.width}")
        return image

    def save(self, image: PixelBuffer, path: PathLike) -> None:
        path = Path(path)
        ext = self._extension(path)
        if not path.parent.is_dir():
            raise FileNotFoundError(f"Directory does not exist: {path.parent}")

        self._writers[ext](image, path)
        logger.info(f"Saved {image.height}x{image.width} image to {path}")
