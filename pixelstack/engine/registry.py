"""Operation registry — every Picture operation is a function registered via decorator.

Usage:
    @operation(name="blur", description="Gaussian blur")
    def blur(picture: Picture) -> Picture:
        return picture.filter(BLUR_KERNEL)

The external command interpreter looks operations up by name and calls them
with already-validated parameters. Adding an operation = one decorated
function. Nothing else changes.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from pixelstack.errors import InvalidArgumentError

if TYPE_CHECKING:
    from pixelstack.model.picture import Picture

logger = logging.getLogger(__name__)

OperationFn = Callable[..., "Picture"]


@dataclass
class OperationSpec:
    name: str
    fn: OperationFn
    description: str = ""

    def check_params(self, picture: "Picture", params: dict[str, Any]) -> None:
        """Fail with InvalidArgumentError when ``params`` do not fit the operation."""
        try:
            inspect.signature(self.fn).bind(picture, **params)
        except TypeError as e:
            raise InvalidArgumentError(f"Bad parameters for operation {self.name!r}: {e}") from e


class OperationRegistry:
    """Name-keyed registry of Picture operations."""

    def __init__(self) -> None:
        self._operations: dict[str, OperationSpec] = {}

    def register(self, spec: OperationSpec) -> None:
        if spec.name in self._operations:
            raise ValueError(f"Duplicate operation name: {spec.name}")
        self._operations[spec.name] = spec
        logger.debug("Registered operation %s", spec.name)

    def get(self, name: str) -> OperationSpec:
        try:
            return self._operations[name]
        except KeyError:
            raise InvalidArgumentError(f"Unknown operation: {name!r}") from None

    def all(self) -> list[OperationSpec]:
        return sorted(self._operations.values(), key=lambda s: s.name)

    def names(self) -> list[str]:
        return sorted(self._operations)

    def apply(self, name: str, picture: "Picture", **params: Any) -> "Picture":
        spec = self.get(name)
        spec.check_params(picture, params)
        return spec.fn(picture, **params)

    @property
    def count(self) -> int:
        return len(self._operations)


# Module-level singleton
_registry = OperationRegistry()


def get_registry() -> OperationRegistry:
    return _registry


def operation(*, name: str, description: str = ""):
    """Decorator to register a Picture operation."""

    def decorator(fn: OperationFn):
        _registry.register(OperationSpec(name=name, fn=fn, description=description))
        return fn

    return decorator
