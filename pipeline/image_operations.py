"""
Image Operations Pipeline
Maps operation names to service calls. Sources are read from an alias
repository and results are written back under the destination aliases.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from models.errors import InvalidImageNameError, InvalidRangeError, UnknownOperationError
from models.pixel_buffer import PixelBuffer
from repositories.alias_repository import ImageAliasRepository
from services.compression_service import CompressionService
from services.filter_service import FilterService
from services.histogram_service import HistogramService
from services.image_service import ImageService
from services.levels_service import LevelsService
from services.split_view_service import SplitViewService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    """
    Registry entry.
    func takes the source buffers followed by the integer parameters and
    returns one buffer, or a tuple with one buffer per destination.
    """
    name: str
    func: Callable[..., object]
    sources: int = 1
    destinations: int = 1
    params: Tuple[str, ...] = ()
    previewable: bool = False


class ImageOperations:
    """
    Runs named operations against an ImageAliasRepository.
    """

    def __init__(self,
                 image_service: ImageService = None,
                 filter_service: FilterService = None,
                 histogram_service: HistogramService = None,
                 levels_service: LevelsService = None,
                 split_view_service: SplitViewService = None,
                 compression_service: CompressionService = None):
        self.image_service = image_service or ImageService()
        self.filter_service = filter_service or FilterService()
        self.histogram_service = histogram_service or HistogramService()
        self.levels_service = levels_service or LevelsService()
        self.split_view_service = split_view_service or SplitViewService()
        self.compression_service = compression_service or CompressionService()
        self._registry = self._build_registry()

    def _build_registry(self) -> Dict[str, Operation]:
        img = self.image_service
        ops = [
            Operation("brighten", img.brighten, params=("increment",)),
            Operation("horizontal-flip", img.flip_horizontal),
            Operation("vertical-flip", img.flip_vertical),
            Operation("red-component", img.red_component),
            Operation("green-component", img.green_component),
            Operation("blue-component", img.blue_component),
            Operation("value-component", img.value_component),
            Operation("intensity-component", img.intensity_component),
            Operation("luma-component", img.luma_component, previewable=True),
            Operation("sepia", img.sepia, previewable=True),
            Operation("blur", self.filter_service.blur, previewable=True),
            Operation("sharpen", self.filter_service.sharpen, previewable=True),
            Operation("color-correct", self.histogram_service.color_correct, previewable=True),
            Operation("levels-adjust", self.levels_service.adjust_levels,
                      params=("black", "mid", "white"), previewable=True),
            Operation("compress", self.compression_service.compress, params=("percentage",)),
            Operation("histogram", self.histogram_service.histogram_image),
            Operation("rgb-split", img.split_rgb, destinations=3),
            Operation("rgb-combine", img.combine, sources=3),
        ]
        return {op.name: op for op in ops}

    # ─── Public API ───────────────────────────────────────────────
    @property
    def names(self) -> List[str]:
        return sorted(self._registry)

    def get(self, name: str) -> Operation:
        if name not in self._registry:
            raise UnknownOperationError(f"Unknown operation '{name}'")
        return self._registry[name]

    def run(self,
            store: ImageAliasRepository,
            name: str,
            sources: Sequence[str],
            destinations: Sequence[str],
            params: Sequence[int] = (),
            split: Optional[float] = None) -> List[str]:
        """
        Apply operation *name* and store its result(s).

        Args:
            store: alias table holding the source images
            name: registered operation name, e.g. "blur"
            sources: source aliases (count depends on the operation)
            destinations: destination aliases
            params: integer parameters, in the operation's declared order
            split: optional split-view percentage for previewable operations

        Returns:
            List[str]: the destination aliases written
        """
        op = self.get(name)
        if len(sources) != op.sources or len(destinations) != op.destinations:
            raise ValueError(
                f"'{name}' takes {op.sources} source(s) and {op.destinations} destination(s), "
                f"got {len(sources)} and {len(destinations)}"
            )
        if len(params) != len(op.params):
            raise ValueError(f"'{name}' expects parameters {list(op.params)}, got {list(params)}")
        if split is not None and not op.previewable:
            raise InvalidRangeError(f"'{name}' does not support a split preview")
        for alias in destinations:
            if not store.is_valid_alias(alias):
                raise InvalidImageNameError(f"'{alias}': cannot be used as an alias for the image")

        inputs = [store.get(alias) for alias in sources]
        logger.info(f"Running {name} on {list(sources)} -> {list(destinations)} params={list(params)}")

        if split is not None:
            result = self.split_view_service.preview(
                inputs[0], lambda image: op.func(image, *params), split
            )
        else:
            result = op.func(*inputs, *params)

        results = result if isinstance(result, tuple) else (result,)
        if len(results) != len(destinations):
            raise TypeError(f"Operation '{name}' produced {len(results)} image(s), expected {len(destinations)}")
        for image in results:
            if not isinstance(image, PixelBuffer):
                raise TypeError(f"Operation '{name}' produced {type(image).__name__}, not a PixelBuffer")

        # the table is only touched once every result is known to be storable
        for alias, image in zip(destinations, results):
            store.put(alias, image)
        return list(destinations)
