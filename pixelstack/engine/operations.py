"""Built-in Picture operations, registered on import."""

from __future__ import annotations

import numpy as np

from pixelstack.engine.mosaic import mosaic as _mosaic
from pixelstack.engine.registry import operation
from pixelstack.model.picture import Picture


@operation(name="blur", description="3x3 Gaussian blur with zero-padded edges")
def blur(picture: Picture) -> Picture:
    return picture.blur()


@operation(name="sharpen", description="5x5 sharpen with zero-padded edges")
def sharpen(picture: Picture) -> Picture:
    return picture.sharpen()


@operation(name="monochrome", description="Rec. 709 luma greyscale")
def monochrome(picture: Picture) -> Picture:
    return picture.monochrome()


@operation(name="sepia", description="Sepia tone color transform")
def sepia(picture: Picture) -> Picture:
    return picture.sepia()


@operation(name="mosaic", description="Flatten nearest-seed regions to their average color")
def mosaic(picture: Picture, num_seeds: int, rng: np.random.Generator | None = None) -> Picture:
    return _mosaic(picture, num_seeds, rng)
