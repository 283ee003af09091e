"""LayeredPicture — a stack of named layers sharing one size and channel ceiling.

Layers are kept in insertion order (first added = bottom-most). That order is
the composition order and the fallback order for top-most visible
resolution. A single current-layer selector targets all single-layer
operations; it is absent until explicitly set.

Width and height may start at 0 and are fixed by the first image placed into
any layer. From then on every image must match them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from numpy.typing import NDArray

from pixelstack.errors import InvalidArgumentError, InvalidStateError
from pixelstack.model.layer import Layer
from pixelstack.model.picture import Picture
from pixelstack.model.pixel import Channel

logger = logging.getLogger(__name__)


class LayeredPicture:
    """Mutable container of layers. Not thread-safe; callers serialize access."""

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        max_val: int = 255,
        layers: Iterable[Layer | str] = (),
    ) -> None:
        if width < 0 or height < 0:
            raise InvalidArgumentError("Width and height cannot be negative")
        if max_val < 0:
            raise InvalidArgumentError("Maximum value cannot be negative")
        if layers is None:
            raise InvalidArgumentError("Given list of layers cannot be None")

        self._width = int(width)
        self._height = int(height)
        self._max_val = int(max_val)
        self._layers: dict[str, Layer] = {}
        self._current: str | None = None

        for layer in layers:
            self.add_layer(layer)

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def max_val(self) -> int:
        return self._max_val

    @property
    def dimensions_fixed(self) -> bool:
        return self._width > 0 and self._height > 0

    def _check_fits(self, image: Picture) -> None:
        if not isinstance(image, Picture):
            raise InvalidArgumentError(f"Expected a Picture, got {type(image).__name__}")
        if self.dimensions_fixed and (image.width, image.height) != (self._width, self._height):
            raise InvalidArgumentError(
                f"Image is {image.width}x{image.height} but layered image is "
                f"{self._width}x{self._height}"
            )

    def _adopt_dimensions(self, image: Picture) -> None:
        if not self.dimensions_fixed:
            self._width = image.width
            self._height = image.height
            logger.debug("Layered image dimensions fixed at %dx%d", self._width, self._height)

    # ------------------------------------------------------------------
    # Layer access
    # ------------------------------------------------------------------

    @property
    def layers(self) -> list[Layer]:
        """Copies of every layer, bottom-most first."""
        return [layer.copy() for layer in self._layers.values()]

    @property
    def layer_names(self) -> list[str]:
        return list(self._layers)

    def layer(self, name: str) -> Layer:
        """A copy of the named layer."""
        if not name or name not in self._layers:
            raise InvalidArgumentError(f"Layer {name!r} does not exist")
        return self._layers[name].copy()

    @property
    def current_layer_name(self) -> str | None:
        return self._current

    @property
    def current_layer(self) -> Layer | None:
        if self._current is None:
            return None
        return self._layers[self._current].copy()

    @property
    def current_image(self) -> Picture:
        """The current layer's image; fails when nothing usable is selected."""
        layer = self._require_current()
        if layer.image is None:
            raise InvalidStateError(f"Current layer {layer.name!r} has no image")
        return layer.image

    def _require_current(self) -> Layer:
        if self._current is None:
            raise InvalidStateError("No layer has been selected")
        return self._layers[self._current]

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, name: object) -> bool:
        return name in self._layers

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_current_layer(self, name: str | Layer) -> None:
        if isinstance(name, Layer):
            name = name.name
        if name is None or name not in self._layers:
            raise InvalidArgumentError(f"Layer name {name!r} is None or doesn't exist")

        image = self._layers[name].image
        if image is not None:
            self._adopt_dimensions(image)
        self._current = name

    def add_layer(self, layer: str | Layer) -> None:
        """Add a layer on top. A name creates an empty, visible layer."""
        if layer is None:
            raise InvalidArgumentError("Layer cannot be None")
        if isinstance(layer, str):
            layer = Layer(layer)
        elif not isinstance(layer, Layer):
            raise InvalidArgumentError(f"Expected a Layer or a name, got {type(layer).__name__}")
        if layer.name in self._layers:
            raise InvalidArgumentError(f"Layer {layer.name!r} already exists")

        if layer.image is not None:
            self._check_fits(layer.image)
            self._adopt_dimensions(layer.image)

        self._layers[layer.name] = layer.copy()
        logger.debug("Added layer %r (%d total)", layer.name, len(self._layers))

    def remove_layer(self, layer: str | Layer) -> None:
        name = layer.name if isinstance(layer, Layer) else layer
        if name is None or name not in self._layers:
            raise InvalidArgumentError(f"Layer {name!r} is None or is not in layered image")

        del self._layers[name]
        if self._current == name:
            self._current = None
        logger.debug("Removed layer %r (%d left)", name, len(self._layers))

    def set_visibility(self, visible: bool) -> None:
        self._require_current().visible = bool(visible)

    def set_current_layer_image(self, image: Picture) -> None:
        layer = self._require_current()
        if image is None:
            raise InvalidArgumentError("Image cannot be None")
        self._check_fits(image)
        self._adopt_dimensions(image)
        layer.image = image

    def resize(self, width: int, height: int, images: Mapping[str, Picture]) -> None:
        """Replace every non-empty layer's image with one of a new size.

        ``images`` must cover exactly the non-empty layers. Everything is
        validated before anything is assigned.
        """
        if width <= 0 or height <= 0:
            raise InvalidArgumentError("Width and height must be positive")
        filled = {name for name, layer in self._layers.items() if layer.image is not None}
        if set(images) != filled:
            raise InvalidArgumentError(
                f"Resize must replace exactly the non-empty layers {sorted(filled)}, "
                f"got {sorted(images)}"
            )
        for name, image in images.items():
            if not isinstance(image, Picture) or (image.width, image.height) != (width, height):
                raise InvalidArgumentError(f"Replacement for layer {name!r} is not {width}x{height}")

        for name, image in images.items():
            self._layers[name].image = image
        self._width = int(width)
        self._height = int(height)
        logger.info("Resized layered image to %dx%d (%d layers)", width, height, len(images))

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def resolve_top_most_visible(self) -> Picture | None:
        """The image shown when compositing.

        The current layer wins when it is visible and non-empty; otherwise
        the first visible, non-empty layer in insertion order; otherwise None.
        """
        if self._current is not None:
            current = self._layers[self._current]
            if current.visible and current.image is not None:
                return current.image

        for layer in self._layers.values():
            if layer.visible and layer.image is not None:
                return layer.image
        return None

    # ------------------------------------------------------------------
    # Picture operations on the current layer's image
    # ------------------------------------------------------------------

    def channel_plane(self, channel: Channel | str) -> NDArray:
        return self.current_image.channel_plane(channel)

    def windowed_subset(self, dimension: int, center: tuple[int, int], channel: Channel | str) -> NDArray:
        return self.current_image.windowed_subset(dimension, center, channel)

    def filter(self, kernel: Sequence[Sequence[float]] | NDArray) -> Picture:
        return self.current_image.filter(kernel)

    def color_transform(self, matrix: Sequence[Sequence[float]] | NDArray) -> Picture:
        return self.current_image.color_transform(matrix)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def copy(self) -> "LayeredPicture":
        clone = LayeredPicture(self._width, self._height, self._max_val, self._layers.values())
        clone._current = self._current
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayeredPicture):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._max_val == other._max_val
            and self._current == other._current
            and list(self._layers.values()) == list(other._layers.values())
        )

    def __repr__(self) -> str:
        return (
            f"LayeredPicture({self._width}x{self._height}, max_val={self._max_val}, "
            f"layers={self.layer_names}, current={self._current!r})"
        )
