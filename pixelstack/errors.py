"""Error categories raised by the editing core.

Every failure is synchronous and fail-fast. Each category also subclasses the
matching builtin so callers can catch either.
"""

from __future__ import annotations


class PixelStackError(Exception):
    """Base class for all pixelstack errors."""


class InvalidArgumentError(PixelStackError, ValueError):
    """A parameter, kernel, matrix, layer name or file body is unusable."""


class InvalidStateError(PixelStackError, RuntimeError):
    """The operation needs a selection (current image/layer) that is missing."""


class ImageNotFoundError(PixelStackError, FileNotFoundError):
    """An input image or manifest does not exist."""


class CodecIOError(PixelStackError, OSError):
    """Reading or writing an image file failed."""
