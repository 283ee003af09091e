"""Mosaic segmentation — flatten nearest-seed regions to their average color.

Algorithm:
1. Draw uniform random (x, y) seed positions, rejecting repeats, until
   ``num_seeds`` distinct seeds exist.
2. Assign every pixel to its nearest seed by Euclidean distance. Ties go to
   the seed drawn first (a later seed wins only when strictly closer).
3. Replace every pixel of a region with the floor average of each channel
   over that region.

The random source is always passed in, so a seeded generator reproduces the
same tiling.
"""

from __future__ import annotations

import logging
import time

import numpy as np
from numpy.typing import NDArray

from pixelstack.config import settings
from pixelstack.errors import InvalidArgumentError
from pixelstack.model.picture import Picture

logger = logging.getLogger(__name__)


def _validate_seed_count(num_seeds: int, width: int, height: int) -> int:
    if isinstance(num_seeds, bool) or not isinstance(num_seeds, (int, np.integer)):
        raise InvalidArgumentError(f"Number of seeds must be an integer, got {num_seeds!r}")
    if num_seeds < 1 or num_seeds > width * height:
        raise InvalidArgumentError(
            f"Number of seeds must be between 1 and {width * height} (the pixel count), got {num_seeds}"
        )
    return int(num_seeds)


def choose_seeds(
    width: int,
    height: int,
    num_seeds: int,
    rng: np.random.Generator,
) -> list[tuple[int, int]]:
    """Distinct ``(row, col)`` seed positions in draw order."""
    num_seeds = _validate_seed_count(num_seeds, width, height)

    seen: set[tuple[int, int]] = set()
    seeds: list[tuple[int, int]] = []
    while len(seeds) < num_seeds:
        x = int(rng.integers(width))
        y = int(rng.integers(height))
        if (y, x) in seen:
            continue
        seen.add((y, x))
        seeds.append((y, x))
    return seeds


def assign_regions(
    width: int,
    height: int,
    seeds: list[tuple[int, int]],
    chunk_pixels: int | None = None,
) -> NDArray[np.int64]:
    """height x width map from pixel to the index of its nearest seed.

    Squared integer distances keep comparisons exact. ``argmin`` returns the
    first minimum, which is the earliest-drawn seed on ties. Pixels are
    processed in flat chunks so memory stays near ``chunk_pixels * len(seeds)``.
    """
    if not seeds:
        raise InvalidArgumentError("At least one seed is required")
    chunk = max(1, chunk_pixels or settings.mosaic_chunk_pixels)

    seed_rows = np.array([s[0] for s in seeds], dtype=np.int64)
    seed_cols = np.array([s[1] for s in seeds], dtype=np.int64)

    total = width * height
    labels = np.empty(total, dtype=np.int64)
    for start in range(0, total, chunk):
        flat = np.arange(start, min(start + chunk, total), dtype=np.int64)
        rows = flat // width
        cols = flat % width
        dist = (rows[:, None] - seed_rows[None, :]) ** 2 + (cols[:, None] - seed_cols[None, :]) ** 2
        labels[start : start + len(flat)] = np.argmin(dist, axis=1)

    return labels.reshape(height, width)


def flatten_regions(grid: NDArray, labels: NDArray[np.int64], num_regions: int) -> NDArray[np.int64]:
    """Set each region to the floor average of its pixels, channel by channel."""
    flat_pixels = grid.reshape(-1, 3).astype(np.int64)
    flat_labels = labels.reshape(-1)

    counts = np.bincount(flat_labels, minlength=num_regions)
    sums = np.zeros((num_regions, 3), dtype=np.int64)
    np.add.at(sums, flat_labels, flat_pixels)

    # Every seed owns at least its own pixel, so no count is zero
    means = sums // counts[:, None]
    return means[flat_labels].reshape(grid.shape)


def mosaic_grid(
    grid: NDArray,
    num_seeds: int,
    rng: np.random.Generator,
    chunk_pixels: int | None = None,
) -> NDArray[np.int64]:
    """Mosaic a raw ``(height, width, 3)`` grid; returns a new grid."""
    height, width = grid.shape[:2]
    t0 = time.perf_counter()

    seeds = choose_seeds(width, height, num_seeds, rng)
    labels = assign_regions(width, height, seeds, chunk_pixels)
    result = flatten_regions(grid, labels, len(seeds))

    elapsed = (time.perf_counter() - t0) * 1000
    logger.debug("Mosaic: %d seeds over %dx%d in %.1fms", len(seeds), width, height, elapsed)
    return result


def mosaic(
    picture: Picture,
    num_seeds: int,
    rng: np.random.Generator | None = None,
    chunk_pixels: int | None = None,
) -> Picture:
    """Mosaic a Picture. Without ``rng`` a generator seeded from settings is used."""
    if rng is None:
        rng = np.random.default_rng(settings.mosaic_seed)
    grid = mosaic_grid(picture.array, num_seeds, rng, chunk_pixels)
    return Picture(picture.width, picture.height, picture.max_val, grid)
