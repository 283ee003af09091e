"""Layer — a named, independently visible slot holding zero or one Picture."""

from __future__ import annotations

from dataclasses import dataclass

from pixelstack.errors import InvalidArgumentError
from pixelstack.model.picture import Picture


@dataclass
class Layer:
    name: str
    image: Picture | None = None
    visible: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgumentError("Layer name cannot be empty or None")
        if self.image is not None and not isinstance(self.image, Picture):
            raise InvalidArgumentError(f"Layer image must be a Picture, got {type(self.image).__name__}")

    @property
    def is_empty(self) -> bool:
        return self.image is None

    def copy(self) -> "Layer":
        # Pictures are immutable; the image is shared, not copied
        return Layer(self.name, self.image, self.visible)
