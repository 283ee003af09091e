"""Pixel — one RGB sample with a per-pixel channel ceiling."""

from __future__ import annotations

import enum

from pixelstack.errors import InvalidArgumentError


class Channel(enum.IntEnum):
    """Color channels, valued by their index in an ``(..., 3)`` pixel array."""

    RED = 0
    GREEN = 1
    BLUE = 2

    @classmethod
    def parse(cls, value: "Channel | str") -> "Channel":
        """Accept a ``Channel`` member or its name (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise InvalidArgumentError(f"Unknown color channel: {value!r}")


class Pixel:
    """An RGB sample at a fixed (row, col) position.

    Channel values are clamped into ``[0, max_val]`` on every write. Position
    and ``max_val`` never change after construction.
    """

    __slots__ = ("_row", "_col", "_max_val", "_values")

    def __init__(
        self,
        row: int,
        col: int,
        red: int = 0,
        green: int = 0,
        blue: int = 0,
        max_val: int = 255,
    ) -> None:
        if row < 0 or col < 0:
            raise InvalidArgumentError("Cannot have coordinates with negative values")
        if max_val < 0:
            raise InvalidArgumentError("Cannot have negative maximum value")
        self._row = int(row)
        self._col = int(col)
        self._max_val = int(max_val)
        self._values = [self._clamp(red), self._clamp(green), self._clamp(blue)]

    def _clamp(self, value: int) -> int:
        value = int(value)
        if value < 0:
            return 0
        if value > self._max_val:
            return self._max_val
        return value

    @property
    def row(self) -> int:
        return self._row

    @property
    def col(self) -> int:
        return self._col

    @property
    def position(self) -> tuple[int, int]:
        return (self._row, self._col)

    @property
    def max_val(self) -> int:
        return self._max_val

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self._values[0], self._values[1], self._values[2])

    def get_channel(self, channel: Channel | str) -> int:
        return self._values[Channel.parse(channel)]

    def set_channel(self, channel: Channel | str, value: int) -> None:
        self._values[Channel.parse(channel)] = self._clamp(value)

    def copy(self) -> "Pixel":
        return Pixel(self._row, self._col, *self._values, max_val=self._max_val)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pixel):
            return NotImplemented
        return (
            self.position == other.position
            and self._max_val == other._max_val
            and self._values == other._values
        )

    def __hash__(self) -> int:
        return hash((self._row, self._col, self._max_val, *self._values))

    def __repr__(self) -> str:
        r, g, b = self._values
        return f"Pixel(row={self._row}, col={self._col}, rgb=({r}, {g}, {b}), max_val={self._max_val})"
