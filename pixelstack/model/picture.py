"""Picture — immutable rectangular grid of RGB pixels.

The grid is held as a read-only ``(height, width, 3)`` int64 array. It is
copied once on construction, so reads never need a defensive copy and every
transform allocates a fresh Picture.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pixelstack.engine import kernels
from pixelstack.errors import InvalidArgumentError
from pixelstack.model.pixel import Channel, Pixel

# One column per input channel, one row per output channel.
_COLOR_MATRIX_SHAPE = (len(Channel), len(Channel))


def _as_matrix(values: Any, what: str) -> NDArray[np.float64]:
    """Coerce a nested sequence into a 2-D float array."""
    if values is None:
        raise InvalidArgumentError(f"Given {what} cannot be None")
    try:
        matrix = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Given {what} is not a numeric matrix: {e}") from e
    if matrix.ndim != 2 or matrix.size == 0:
        raise InvalidArgumentError(f"Given {what} must be a non-empty 2-D matrix")
    return matrix


def _grid_from_pixels(pixels: Sequence[Sequence[Pixel]], width: int, height: int) -> NDArray[np.int64]:
    if len(pixels) != height or any(len(row) != width for row in pixels):
        raise InvalidArgumentError("Pixel sequence does not match image's width and height")
    grid = np.empty((height, width, 3), dtype=np.int64)
    for r, row in enumerate(pixels):
        for c, pixel in enumerate(row):
            if not isinstance(pixel, Pixel):
                raise InvalidArgumentError(f"Expected Pixel at ({r}, {c}), got {type(pixel).__name__}")
            grid[r, c] = pixel.rgb
    return grid


class Picture:
    """A width x height grid of pixels sharing one ``max_val``."""

    __slots__ = ("_width", "_height", "_max_val", "_data")

    def __init__(
        self,
        width: int,
        height: int,
        max_val: int,
        pixels: Sequence[Sequence[Pixel]] | NDArray,
    ) -> None:
        if width <= 0 or height <= 0:
            raise InvalidArgumentError("Width and height must be positive")
        if max_val < 0:
            raise InvalidArgumentError("Cannot have negative maximum value")
        if pixels is None:
            raise InvalidArgumentError("Pixel sequence cannot be None")

        if isinstance(pixels, np.ndarray):
            if pixels.shape != (height, width, 3):
                raise InvalidArgumentError(
                    f"Pixel grid of shape {pixels.shape} does not match "
                    f"image's width and height ({height}, {width}, 3)"
                )
            # Clamp before the integer cast so huge floats saturate instead of wrapping
            grid = np.trunc(np.clip(pixels, 0, max_val)).astype(np.int64)
        else:
            grid = _grid_from_pixels(pixels, width, height)

        data = np.clip(grid, 0, max_val)
        data.flags.writeable = False

        self._width = int(width)
        self._height = int(height)
        self._max_val = int(max_val)
        self._data = data

    @classmethod
    def from_array(cls, grid: NDArray, max_val: int = 255) -> "Picture":
        """Wrap a ``(height, width, 3)`` array; values are clamped into range."""
        grid = np.asarray(grid)
        if grid.ndim != 3 or grid.shape[2] != 3:
            raise InvalidArgumentError(f"Expected a (height, width, 3) grid, got shape {grid.shape}")
        return cls(grid.shape[1], grid.shape[0], max_val, grid)

    # ------------------------------------------------------------------
    # Accessors
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
    def array(self) -> NDArray[np.int64]:
        """The read-only backing grid."""
        return self._data

    def to_array(self) -> NDArray[np.int64]:
        """A writable copy of the backing grid."""
        return self._data.copy()

    @property
    def pixels(self) -> list[list[Pixel]]:
        """Fresh Pixel objects; mutating them does not affect this picture."""
        return [
            [Pixel(r, c, *self._data[r, c].tolist(), max_val=self._max_val) for c in range(self._width)]
            for r in range(self._height)
        ]

    def pixel(self, row: int, col: int) -> Pixel:
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise InvalidArgumentError(f"Position ({row}, {col}) is out of bounds")
        return Pixel(row, col, *self._data[row, col].tolist(), max_val=self._max_val)

    def channel_plane(self, channel: Channel | str) -> NDArray[np.int64]:
        """height x width grid of one channel's raw values."""
        return self._data[:, :, Channel.parse(channel)].copy()

    def windowed_subset(
        self,
        dimension: int,
        center: tuple[int, int],
        channel: Channel | str,
    ) -> NDArray[np.int64]:
        """``dimension`` x ``dimension`` window of one channel around ``center``.

        ``center`` is ``(row, col)``. Cells falling outside the picture are 0;
        edges are never replicated.
        """
        if dimension <= 0 or dimension % 2 != 1:
            raise InvalidArgumentError("Dimension is even or not positive")
        if center is None:
            raise InvalidArgumentError("Given center cannot be None")
        plane_index = Channel.parse(channel)
        row, col = center
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise InvalidArgumentError("Specified center is out of bounds")

        half = dimension // 2
        subset = np.zeros((dimension, dimension), dtype=np.int64)

        top, left = row - half, col - half
        r0, r1 = max(top, 0), min(row + half + 1, self._height)
        c0, c1 = max(left, 0), min(col + half + 1, self._width)
        subset[r0 - top : r1 - top, c0 - left : c1 - left] = self._data[r0:r1, c0:c1, plane_index]
        return subset

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def filter(self, kernel: Sequence[Sequence[float]] | NDArray) -> "Picture":
        """Convolve every channel with ``kernel`` using zero padding.

        Each output value is the weighted window sum truncated toward zero,
        then clamped into ``[0, max_val]``.
        """
        k = _as_matrix(kernel, "kernel")
        size = k.shape[0]
        if k.shape[0] != k.shape[1] or size % 2 == 0:
            raise InvalidArgumentError("Given kernel is not odd and square")

        pad = size // 2
        padded = np.pad(self._data, ((pad, pad), (pad, pad), (0, 0)), mode="constant", constant_values=0)
        acc = np.zeros(self._data.shape, dtype=np.float64)

        # Row-major kernel order, one term per window cell
        for a in range(size):
            for b in range(size):
                acc += k[a, b] * padded[a : a + self._height, b : b + self._width]

        return self._derive(acc)

    def color_transform(self, matrix: Sequence[Sequence[float]] | NDArray) -> "Picture":
        """Map every pixel's (R, G, B) through a 3x3 matrix."""
        m = _as_matrix(matrix, "matrix")
        if m.shape != _COLOR_MATRIX_SHAPE:
            raise InvalidArgumentError(
                "Given matrix is not the same dimensions as the number of color channels"
            )

        red = self._data[:, :, Channel.RED]
        green = self._data[:, :, Channel.GREEN]
        blue = self._data[:, :, Channel.BLUE]
        out = np.empty(self._data.shape, dtype=np.float64)
        for c in Channel:
            out[:, :, c] = m[c, 0] * red + m[c, 1] * green + m[c, 2] * blue

        return self._derive(out)

    def blur(self) -> "Picture":
        return self.filter(kernels.BLUR_KERNEL)

    def sharpen(self) -> "Picture":
        return self.filter(kernels.SHARPEN_KERNEL)

    def monochrome(self) -> "Picture":
        return self.color_transform(kernels.MONOCHROME_MATRIX)

    def sepia(self) -> "Picture":
        return self.color_transform(kernels.SEPIA_MATRIX)

    def _derive(self, values: NDArray[np.float64]) -> "Picture":
        return Picture(self._width, self._height, self._max_val, np.trunc(values))

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Picture):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._max_val == other._max_val
            and np.array_equal(self._data, other._data)
        )

    def __hash__(self) -> int:
        return hash((self._width, self._height, self._max_val, self._data.tobytes()))

    def __repr__(self) -> str:
        return f"Picture({self._width}x{self._height}, max_val={self._max_val})"
