"""Plain-text PPM (``P3``) codec.

Layout written by ``encode_ppm``::

    P3
    <width> <height>
    <max_val>
    <value>          one channel value per line, R G B per pixel, row-major

On decode, lines whose first non-blank character is ``#`` are comments and are
dropped; the rest is read as whitespace-separated tokens. Tokens after the
last body value are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from pixelstack.errors import CodecIOError, ImageNotFoundError, InvalidArgumentError
from pixelstack.model.picture import Picture

logger = logging.getLogger(__name__)

PPM_MAGIC = "P3"
_HEADER_INTS = 3  # width, height, max_val


def encode_ppm(picture: Picture) -> str:
    """Serialize a Picture to P3 text."""
    lines = [
        PPM_MAGIC,
        f"{picture.width} {picture.height}",
        str(picture.max_val),
    ]
    lines.extend(str(v) for v in picture.array.reshape(-1).tolist())
    return "\n".join(lines) + "\n"


def decode_ppm(text: str) -> Picture:
    """Parse P3 text into a Picture."""
    content = [line for line in text.splitlines() if not line.lstrip().startswith("#")]
    tokens = " ".join(content).split()

    if not tokens or tokens[0] != PPM_MAGIC:
        raise InvalidArgumentError("Given file is not in PPM format")

    header = tokens[1 : 1 + _HEADER_INTS]
    if len(header) < _HEADER_INTS:
        raise InvalidArgumentError("PPM header is missing width, height or maximum value")
    try:
        width, height, max_val = (int(t) for t in header)
    except ValueError as e:
        raise InvalidArgumentError(f"PPM header is not numeric: {header}") from e
    if width <= 0 or height <= 0 or max_val < 0:
        raise InvalidArgumentError(f"Invalid PPM header: {width}x{height}, max value {max_val}")

    expected = width * height * 3
    body = tokens[1 + _HEADER_INTS :]
    if len(body) < expected:
        raise InvalidArgumentError(f"PPM body has {len(body)} values, expected {expected}")
    if len(body) > expected:
        logger.debug("Ignoring %d tokens after the PPM body", len(body) - expected)
        body = body[:expected]
    try:
        values = np.array([int(t) for t in body], dtype=np.int64)
    except ValueError as e:
        raise InvalidArgumentError("PPM body contains a non-integer value") from e

    return Picture(width, height, max_val, values.reshape(height, width, 3))


def read_ppm(path: str | Path) -> Picture:
    path = Path(path)
    try:
        text = path.read_text(encoding="ascii")
    except FileNotFoundError as e:
        raise ImageNotFoundError(f"PPM file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise InvalidArgumentError(f"PPM file is not plain text: {path}") from e
    except OSError as e:
        raise CodecIOError(f"Could not read {path}: {e}") from e

    picture = decode_ppm(text)
    logger.info("Read PPM %s (%dx%d)", path, picture.width, picture.height)
    return picture


def write_ppm(picture: Picture, path: str | Path) -> None:
    path = Path(path)
    try:
        path.write_text(encode_ppm(picture), encoding="ascii")
    except OSError as e:
        raise CodecIOError(f"Could not write {path}: {e}") from e
    logger.info("Wrote PPM %s (%dx%d)", path, picture.width, picture.height)
