"""Downsizing — resample a pixel grid onto a smaller grid.

Target cell (i, j) maps back to source coordinates
``x = j * width / new_width`` and ``y = i * height / new_height``. When both
are integral the source pixel is copied; otherwise each channel is
bilinearly interpolated from the four floor/ceil neighbours and truncated.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from pixelstack.errors import InvalidArgumentError
from pixelstack.model.picture import Picture

logger = logging.getLogger(__name__)


def _validate_target(new_width: int, new_height: int, width: int, height: int) -> None:
    for value, what in ((new_width, "width"), (new_height, "height")):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidArgumentError(f"New {what} must be an integer, got {value!r}")
    if new_width <= 0 or new_height <= 0:
        raise InvalidArgumentError("New height and width must be positive")
    if new_width > width or new_height > height:
        raise InvalidArgumentError(
            f"Cannot downsize {width}x{height} to larger dimensions {new_width}x{new_height}"
        )


def _source_axis(new_size: int, size: int) -> tuple[NDArray, NDArray, NDArray]:
    """Floor index, ceil index and fractional offset along one axis."""
    coords = np.arange(new_size, dtype=np.int64) * size / new_size
    lo = np.floor(coords).astype(np.int64)
    hi = np.ceil(coords).astype(np.int64)
    return lo, hi, coords - lo


def downsize_grid(grid: NDArray, new_width: int, new_height: int) -> NDArray[np.int64]:
    """Resample a ``(height, width, 3)`` grid to ``(new_height, new_width, 3)``."""
    height, width = grid.shape[:2]
    _validate_target(new_width, new_height, width, height)

    x0, x1, fx = _source_axis(new_width, width)
    y0, y1, fy = _source_axis(new_height, height)

    src = np.asarray(grid, dtype=np.float64)
    a = src[np.ix_(y0, x0)]
    b = src[np.ix_(y0, x1)]
    c = src[np.ix_(y1, x0)]
    d = src[np.ix_(y1, x1)]

    wx = fx[None, :, None]
    wy = fy[:, None, None]
    top = a + (b - a) * wx
    bottom = c + (d - c) * wx
    blended = top + (bottom - top) * wy

    exact = (fy == 0)[:, None] & (fx == 0)[None, :]
    result = np.where(exact[:, :, None], a, np.trunc(blended)).astype(np.int64)

    logger.debug("Downsized %dx%d -> %dx%d", width, height, new_width, new_height)
    return result


def downsize(picture: Picture, new_width: int, new_height: int) -> Picture:
    grid = downsize_grid(picture.array, new_width, new_height)
    return Picture(new_width, new_height, picture.max_val, grid)
