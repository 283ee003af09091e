"""Supported image formats, dispatched through one read/write interface.

``ImageFormat`` is a closed set. PPM goes to the text codec; PNG and JPEG are
delegated to Pillow and always exchange an 8-bit RGB grid.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from pixelstack.codec.ppm import read_ppm, write_ppm
from pixelstack.errors import CodecIOError, ImageNotFoundError, InvalidArgumentError
from pixelstack.model.picture import Picture

logger = logging.getLogger(__name__)

# Binary codecs are 8 bits per channel.
_BINARY_MAX_VAL = 255

# Extra spellings accepted when parsing a format name or suffix.
_ALIASES = {"jpg": "jpeg"}


class ImageFormat(enum.Enum):
    PPM = "ppm"
    PNG = "png"
    JPEG = "jpeg"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def parse(cls, value: "ImageFormat | str") -> "ImageFormat":
        """Accept a member, a name (``"png"``) or an extension (``".png"``)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().lstrip(".")
            key = _ALIASES.get(key, key)
            for fmt in cls:
                if fmt.value == key:
                    return fmt
        raise InvalidArgumentError(f"Unsupported image format: {value!r}")

    @classmethod
    def from_path(cls, path: str | Path) -> "ImageFormat":
        suffix = Path(path).suffix
        if not suffix:
            raise InvalidArgumentError(f"Cannot infer image format of {path}: no extension")
        return cls.parse(suffix)

    def read(self, path: str | Path) -> Picture:
        reader, _ = _CODECS[self]
        return reader(Path(path))

    def write(self, picture: Picture, path: str | Path) -> None:
        _, writer = _CODECS[self]
        writer(picture, Path(path))


def _read_pillow(path: Path) -> Picture:
    try:
        with Image.open(path) as img:
            grid = np.asarray(img.convert("RGB"), dtype=np.int64)
    except FileNotFoundError as e:
        raise ImageNotFoundError(f"Image file not found: {path}") from e
    except UnidentifiedImageError as e:
        raise InvalidArgumentError(f"Not a readable image: {path}") from e
    except OSError as e:
        raise CodecIOError(f"Could not read {path}: {e}") from e

    logger.info("Read image %s (%dx%d)", path, grid.shape[1], grid.shape[0])
    return Picture.from_array(grid, _BINARY_MAX_VAL)


def _pillow_writer(pillow_format: str):
    def write(picture: Picture, path: Path) -> None:
        grid = np.clip(picture.array, 0, _BINARY_MAX_VAL).astype(np.uint8)
        try:
            Image.fromarray(grid).save(path, format=pillow_format)
        except OSError as e:
            raise CodecIOError(f"Could not write {path}: {e}") from e
        logger.info("Wrote %s %s (%dx%d)", pillow_format, path, picture.width, picture.height)

    return write


_CODECS = {
    ImageFormat.PPM: (read_ppm, write_ppm),
    ImageFormat.PNG: (_read_pillow, _pillow_writer("PNG")),
    ImageFormat.JPEG: (_read_pillow, _pillow_writer("JPEG")),
}


def read_image(path: str | Path, fmt: ImageFormat | str | None = None) -> Picture:
    """Read one image; the format defaults to the one implied by the suffix."""
    fmt = ImageFormat.from_path(path) if fmt is None else ImageFormat.parse(fmt)
    return fmt.read(path)


def write_image(picture: Picture, path: str | Path, fmt: ImageFormat | str | None = None) -> None:
    if picture is None:
        raise InvalidArgumentError("Given image cannot be None")
    fmt = ImageFormat.from_path(path) if fmt is None else ImageFormat.parse(fmt)
    fmt.write(picture, path)
