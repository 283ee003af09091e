"""Tests for mosaic segmentation."""

import numpy as np
import pytest

from pixelstack.engine.mosaic import assign_regions, choose_seeds, flatten_regions, mosaic
from pixelstack.errors import InvalidArgumentError
from tests.conftest import SEED, random_picture


def test_one_seed_per_pixel_is_identity(gradient, rng):
    assert mosaic(gradient, gradient.width * gradient.height, rng) == gradient


def test_single_seed_averages_everything(gradient, rng):
    result = mosaic(gradient, 1, rng)
    assert np.all(result.array == [85, 95, 105])


def test_seeded_mosaic_is_reproducible():
    pic = random_picture(20, 15)
    a = mosaic(pic, 12, np.random.default_rng(SEED))
    b = mosaic(pic, 12, np.random.default_rng(SEED))
    assert a == b


def test_mosaic_keeps_size_and_max_val():
    pic = random_picture(9, 7)
    result = mosaic(pic, 5, np.random.default_rng(SEED))
    assert (result.width, result.height, result.max_val) == (9, 7, 255)


def test_mosaic_does_not_mutate(gradient, rng):
    before = gradient.to_array()
    mosaic(gradient, 2, rng)
    assert np.array_equal(gradient.array, before)


@pytest.mark.parametrize("num_seeds", [0, -1, 7, 2.0])
def test_seed_count_bounds(gradient, rng, num_seeds):
    with pytest.raises(InvalidArgumentError):
        mosaic(gradient, num_seeds, rng)


def test_choose_seeds_distinct_and_in_bounds(rng):
    seeds = choose_seeds(4, 3, 12, rng)
    assert len(seeds) == 12
    assert len(set(seeds)) == 12
    assert all(0 <= r < 3 and 0 <= c < 4 for r, c in seeds)


def test_assign_regions_nearest_seed():
    labels = assign_regions(5, 1, [(0, 0), (0, 4)])
    assert labels.tolist() == [[0, 0, 0, 1, 1]]


def test_assign_regions_tie_goes_to_first_seed():
    labels = assign_regions(3, 1, [(0, 2), (0, 0)])
    assert labels.tolist() == [[1, 0, 0]]


def test_assign_regions_chunking_matches_single_pass():
    seeds = [(0, 0), (3, 7), (5, 2), (1, 6)]
    whole = assign_regions(8, 6, seeds, chunk_pixels=10_000)
    chunked = assign_regions(8, 6, seeds, chunk_pixels=5)
    assert np.array_equal(whole, chunked)


def test_flatten_regions_floor_average():
    grid = np.array([[[1, 2, 3], [2, 4, 6], [9, 9, 9]]])
    labels = np.array([[0, 0, 1]])
    flat = flatten_regions(grid, labels, 2)
    assert flat.tolist() == [[[1, 3, 4], [1, 3, 4], [9, 9, 9]]]
