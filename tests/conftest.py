"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from pixelstack.model.layer import Layer
from pixelstack.model.layered import LayeredPicture
from pixelstack.model.picture import Picture
from pixelstack.workspace import Workspace


# 2x2 picture with every pixel (16, 32, 64)
UNIFORM_RGB = (16, 32, 64)

# 2x3 picture, distinct values per pixel
GRADIENT_GRID = [
    [[10, 20, 30], [40, 50, 60], [70, 80, 90]],
    [[100, 110, 120], [130, 140, 150], [160, 170, 180]],
]

SAMPLE_PPM = """P3
# written by hand
3 2
255
255
0
0
0
255
0
0
0
255
# second row
255
255
255
0
0
0
128
128
128
"""

SEED = 1234


def uniform_picture(width: int, height: int, rgb=UNIFORM_RGB, max_val: int = 255) -> Picture:
    grid = np.empty((height, width, 3), dtype=np.int64)
    grid[:, :] = rgb
    return Picture(width, height, max_val, grid)


def random_picture(width: int, height: int, seed: int = SEED) -> Picture:
    rng = np.random.default_rng(seed)
    return Picture.from_array(rng.integers(0, 256, size=(height, width, 3)))


@pytest.fixture
def uniform_2x2() -> Picture:
    return uniform_picture(2, 2)


@pytest.fixture
def gradient() -> Picture:
    return Picture.from_array(np.array(GRADIENT_GRID))


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(SEED)


@pytest.fixture
def three_layers() -> LayeredPicture:
    """A(empty, visible), B(image, visible), C(image, invisible)."""
    b = uniform_picture(2, 2, (1, 2, 3))
    c = uniform_picture(2, 2, (4, 5, 6))
    return LayeredPicture(
        2,
        2,
        255,
        [Layer("A"), Layer("B", b), Layer("C", c, visible=False)],
    )


@pytest.fixture
def workspace() -> Workspace:
    return Workspace(rng=np.random.default_rng(SEED))
