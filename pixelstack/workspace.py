"""Workspace — the editing session behind the command interpreter.

Holds an ordered list of layered images and a current-image selector. Layer
commands and Picture operations target the current image's current layer;
file commands read into it or export from it.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

import numpy as np

import pixelstack.engine.operations  # noqa: F401  (registers built-in operations)
from pixelstack.codec.formats import ImageFormat, read_image, write_image
from pixelstack.codec.manifest import read_layered, write_layered
from pixelstack.config import settings
from pixelstack.engine.downsize import downsize as _downsize
from pixelstack.engine.patterns import generate_checkerboard
from pixelstack.engine.registry import OperationRegistry, get_registry
from pixelstack.errors import InvalidArgumentError, InvalidStateError
from pixelstack.model.layer import Layer
from pixelstack.model.layered import LayeredPicture
from pixelstack.model.picture import Picture

logger = logging.getLogger(__name__)


class Workspace:
    """Ordered collection of layered images with one current selection."""

    def __init__(
        self,
        registry: OperationRegistry | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.rng = rng if rng is not None else np.random.default_rng(settings.mosaic_seed)
        self._images: list[LayeredPicture] = []
        self._current: int | None = None

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    @property
    def images(self) -> list[LayeredPicture]:
        return list(self._images)

    @property
    def current_index(self) -> int | None:
        return self._current

    @property
    def current_image(self) -> LayeredPicture:
        if self._current is None:
            raise InvalidStateError("No image has been selected")
        return self._images[self._current]

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._images):
            raise InvalidArgumentError(f"Image index {index!r} out of range (0..{len(self._images) - 1})")

    def add_image(self, image: LayeredPicture) -> None:
        """Append an image; the first image added becomes current."""
        if not isinstance(image, LayeredPicture):
            raise InvalidArgumentError(f"Expected a LayeredPicture, got {type(image).__name__}")
        self._images.append(image)
        if self._current is None:
            self._current = len(self._images) - 1
        logger.info("Added image #%d (%d total)", len(self._images) - 1, len(self._images))

    def new_image(self) -> LayeredPicture:
        image = LayeredPicture(max_val=settings.default_max_val)
        self.add_image(image)
        return image

    def remove_image(self, index: int) -> None:
        self._check_index(index)
        del self._images[index]
        if self._current is not None:
            if index == self._current:
                self._current = None
            elif index < self._current:
                self._current -= 1
        logger.info("Removed image #%d (%d left)", index, len(self._images))

    def set_current_image(self, index: int) -> None:
        self._check_index(index)
        self._current = index

    # ------------------------------------------------------------------
    # Layers of the current image
    # ------------------------------------------------------------------

    def create_layer(self, name: str) -> None:
        self.current_image.add_layer(name)
        logger.info("Created layer %r", name)

    def remove_layer(self, name: str) -> None:
        self.current_image.remove_layer(name)
        logger.info("Removed layer %r", name)

    def set_current_layer(self, name: str) -> None:
        self.current_image.set_current_layer(name)

    def set_visibility(self, visible: bool) -> None:
        self.current_image.set_visibility(visible)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def apply(self, name: str, **params: Any) -> Picture:
        """Run a registered operation on the current layer and store the result there."""
        spec = self.registry.get(name)
        image = self.current_image
        source = image.current_image
        spec.check_params(source, params)

        t0 = time.perf_counter()
        result = spec.fn(source, **params)
        elapsed = (time.perf_counter() - t0) * 1000

        image.set_current_layer_image(result)
        logger.debug("%s on layer %r completed in %.1fms", name, image.current_layer_name, elapsed)
        return result

    def blur(self) -> Picture:
        return self.apply("blur")

    def sharpen(self) -> Picture:
        return self.apply("sharpen")

    def monochrome(self) -> Picture:
        return self.apply("monochrome")

    def sepia(self) -> Picture:
        return self.apply("sepia")

    def mosaic(self, num_seeds: int) -> Picture:
        return self.apply("mosaic", num_seeds=num_seeds, rng=self.rng)

    def downsize(self, width: int, height: int) -> None:
        """Resample every non-empty layer of the current image to ``width`` x ``height``."""
        image = self.current_image
        resized = {
            layer.name: _downsize(layer.image, width, height)
            for layer in image.layers
            if layer.image is not None
        }
        if not resized:
            raise InvalidStateError("Current image has no layer with an image to downsize")
        image.resize(width, height, resized)

    def checkerboard(self, tile_size: int, num_tiles: int, name: str = "checkerboard") -> Picture:
        """Add a layer holding a generated checkerboard, creating an image if there is none."""
        board = generate_checkerboard(tile_size, num_tiles)
        image = self.current_image if self._images else self.new_image()
        image.add_layer(Layer(name, board))
        logger.info("Created layer %r with a %dx%d checkerboard", name, board.width, board.height)
        return board

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def load(self, path: str | Path) -> Picture:
        """Read one image (format from its suffix) into the current layer."""
        image = self.current_image
        if image.current_layer_name is None:
            raise InvalidStateError("No layer has been selected to load into")
        picture = read_image(path)
        image.set_current_layer_image(picture)
        return picture

    def save(self, path: str | Path, fmt: ImageFormat | str | None = None) -> None:
        """Export the top-most visible image of the current image."""
        picture = self.current_image.resolve_top_most_visible()
        if picture is None:
            raise InvalidStateError("There are no visible layers with an image to save")
        write_image(picture, path, fmt)

    def save_all(self, manifest_path: str | Path, fmt: ImageFormat | str | None = None) -> None:
        write_layered(self.current_image, manifest_path, fmt or settings.default_format)

    def open_layered(self, manifest_path: str | Path, fmt: ImageFormat | str | None = None) -> LayeredPicture:
        """Read a layered image and add it to the workspace."""
        image = read_layered(manifest_path, fmt)
        self.add_image(image)
        return image
