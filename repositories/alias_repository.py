import os
import re
from typing import Dict, Iterator

from dotenv import load_dotenv

from models.errors import ImageNotFoundError, InvalidImageNameError
from models.pixel_buffer import PixelBuffer

load_dotenv()


class ImageAliasRepository:
    """
    In-memory name → PixelBuffer table.
    Re-using an alias overwrites the stored image.
    """

    def __init__(self, alias_pattern: str = None):
        pattern = alias_pattern or os.getenv("ALIAS_NAME_PATTERN", r"[a-zA-Z0-9._-]+")
        self._alias_re = re.compile(pattern)
        self._images: Dict[str, PixelBuffer] = {}

    def is_valid_alias(self, name: str) -> bool:
        return isinstance(name, str) and self._alias_re.fullmatch(name) is not None

    def put(self, name: str, image: PixelBuffer) -> None:
        if not self.is_valid_alias(name):
            raise InvalidImageNameError(f"'{name}': cannot be used as an alias for the image")
        if not isinstance(image, PixelBuffer):
            raise TypeError(f"Expected a PixelBuffer, got {type(image).__name__}")
        self._images[name] = image

    def get(self, name: str) -> PixelBuffer:
        if name not in self._images:
            raise ImageNotFoundError(f"'{name}': does not exist")
        return self._images[name]

    def remove(self, name: str) -> None:
        self._images.pop(name, None)

    def clear(self) -> None:
        self._images.clear()

    def names(self) -> Iterator[str]:
        return iter(sorted(self._images))

    def __contains__(self, name) -> bool:
        return name in self._images

    def __len__(self) -> int:
        return len(self._images)
