"""Procedural pattern generation."""

from __future__ import annotations

import numpy as np

from pixelstack.errors import InvalidArgumentError
from pixelstack.model.picture import Picture

_WHITE = 255
_BLACK = 0
_PATTERN_MAX_VAL = 255


def _require_positive_int(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise InvalidArgumentError(f"{what} must be a positive integer, got {value!r}")
    return int(value)


def generate_checkerboard(tile_size: int, num_tiles: int) -> Picture:
    """Square black/white checkerboard, ``num_tiles`` tiles of ``tile_size`` px per side.

    The tile at (0, 0) is white; neighbours alternate along both axes.
    """
    tile_size = _require_positive_int(tile_size, "Tile size")
    num_tiles = _require_positive_int(num_tiles, "Number of tiles")

    side = tile_size * num_tiles
    tile_index = np.arange(side) // tile_size
    white = (tile_index[:, None] + tile_index[None, :]) % 2 == 0

    grid = np.where(white[:, :, None], _WHITE, _BLACK).repeat(3, axis=2)
    return Picture(side, side, _PATTERN_MAX_VAL, grid)
