"""Tests for the editing Workspace."""

import logging

import numpy as np
import pytest

from pixelstack.codec.ppm import read_ppm, write_ppm
from pixelstack.errors import ImageNotFoundError, InvalidArgumentError, InvalidStateError
from pixelstack.main import create_workspace
from pixelstack.model.layer import Layer
from pixelstack.workspace import Workspace
from tests.conftest import SEED, random_picture, uniform_picture


def _with_layer(ws: Workspace, picture, name: str = "base") -> None:
    ws.new_image()
    ws.set_current_image(len(ws.images) - 1)
    ws.create_layer(name)
    ws.set_current_layer(name)
    ws.current_image.set_current_layer_image(picture)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class TestImages:
    def test_empty_workspace_has_no_current(self, workspace):
        assert workspace.images == []
        with pytest.raises(InvalidStateError):
            workspace.current_image

    def test_first_image_becomes_current(self, workspace):
        first = workspace.new_image()
        workspace.new_image()
        assert workspace.current_image is first
        assert workspace.current_index == 0
        assert len(workspace.images) == 2

    def test_set_current_image(self, workspace):
        workspace.new_image()
        second = workspace.new_image()
        workspace.set_current_image(1)
        assert workspace.current_image is second
        with pytest.raises(InvalidArgumentError):
            workspace.set_current_image(2)

    def test_remove_current_image_clears_selection(self, workspace):
        workspace.new_image()
        workspace.remove_image(0)
        assert workspace.current_index is None
        with pytest.raises(InvalidArgumentError):
            workspace.remove_image(0)

    def test_remove_earlier_image_shifts_selection(self, workspace):
        workspace.new_image()
        workspace.new_image()
        third = workspace.new_image()
        workspace.set_current_image(2)
        workspace.remove_image(0)
        assert workspace.current_index == 1
        assert workspace.current_image is third

    def test_add_image_rejects_non_layered(self, workspace):
        with pytest.raises(InvalidArgumentError):
            workspace.add_image(uniform_picture(1, 1))


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


class TestLayers:
    def test_layer_commands_need_an_image(self, workspace):
        with pytest.raises(InvalidStateError):
            workspace.create_layer("bg")

    def test_create_select_hide(self, workspace):
        workspace.new_image()
        workspace.create_layer("bg")
        workspace.set_current_layer("bg")
        workspace.set_visibility(False)
        assert not workspace.current_image.layer("bg").visible

    def test_remove_layer(self, workspace):
        workspace.new_image()
        workspace.create_layer("bg")
        workspace.remove_layer("bg")
        assert "bg" not in workspace.current_image


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class TestOperations:
    def test_blur_updates_current_layer(self, workspace):
        _with_layer(workspace, uniform_picture(2, 2))
        result = workspace.blur()
        assert workspace.current_image.current_image is result
        assert result.pixel(0, 0).rgb == (9, 18, 36)

    def test_color_operations(self, workspace):
        _with_layer(workspace, uniform_picture(1, 1, (100, 75, 50)))
        assert workspace.sepia().pixel(0, 0).rgb == (106, 94, 73)

        _with_layer(workspace, uniform_picture(1, 1, (100, 75, 50)))
        workspace.set_current_image(1)
        assert workspace.monochrome().pixel(0, 0).rgb == (78, 78, 78)

    def test_sharpen(self, workspace):
        _with_layer(workspace, uniform_picture(3, 3, (10, 10, 10)))
        assert workspace.sharpen().pixel(1, 1).rgb == (30, 30, 30)

    def test_operation_on_other_layers_untouched(self, workspace):
        _with_layer(workspace, uniform_picture(2, 2))
        workspace.current_image.add_layer(Layer("top", uniform_picture(2, 2, (1, 1, 1))))
        workspace.blur()
        assert workspace.current_image.layer("top").image == uniform_picture(2, 2, (1, 1, 1))

    def test_apply_unknown_operation(self, workspace):
        _with_layer(workspace, uniform_picture(2, 2))
        with pytest.raises(InvalidArgumentError):
            workspace.apply("emboss")

    def test_apply_unexpected_param_leaves_layer(self, workspace):
        _with_layer(workspace, uniform_picture(2, 2))
        with pytest.raises(InvalidArgumentError):
            workspace.apply("blur", radius=3)
        assert workspace.current_image.current_image == uniform_picture(2, 2)

    def test_apply_without_layer(self, workspace):
        workspace.new_image()
        with pytest.raises(InvalidStateError):
            workspace.blur()

    def test_apply_on_empty_layer(self, workspace):
        workspace.new_image()
        workspace.create_layer("bg")
        workspace.set_current_layer("bg")
        with pytest.raises(InvalidStateError):
            workspace.sepia()

    def test_mosaic_is_reproducible_with_seeded_rng(self):
        pic = random_picture(12, 10)
        results = []
        for _ in range(2):
            ws = Workspace(rng=np.random.default_rng(SEED))
            _with_layer(ws, pic)
            results.append(ws.mosaic(8))
        assert results[0] == results[1]

    def test_mosaic_one_seed_per_pixel(self, workspace, gradient):
        _with_layer(workspace, gradient)
        assert workspace.mosaic(6) == gradient

    def test_apply_logs_timing(self, workspace, caplog):
        _with_layer(workspace, uniform_picture(2, 2))
        with caplog.at_level(logging.DEBUG, logger="pixelstack.workspace"):
            workspace.blur()
        assert "blur on layer 'base' completed" in caplog.text


# ---------------------------------------------------------------------------
# Downsize
# ---------------------------------------------------------------------------


class TestDownsize:
    def test_downsize_all_layers(self, workspace):
        _with_layer(workspace, uniform_picture(4, 4, (10, 20, 30)))
        image = workspace.current_image
        image.add_layer(Layer("top", uniform_picture(4, 4, (1, 2, 3)), visible=False))
        image.add_layer("empty")

        workspace.downsize(2, 2)

        assert (image.width, image.height) == (2, 2)
        assert image.layer("base").image == uniform_picture(2, 2, (10, 20, 30))
        assert image.layer("top").image == uniform_picture(2, 2, (1, 2, 3))
        assert image.layer("empty").is_empty

    def test_downsize_rejects_upsizing(self, workspace):
        _with_layer(workspace, uniform_picture(4, 4))
        with pytest.raises(InvalidArgumentError):
            workspace.downsize(5, 2)
        assert workspace.current_image.width == 4

    def test_downsize_without_pixels(self, workspace):
        workspace.new_image()
        with pytest.raises(InvalidStateError):
            workspace.downsize(1, 1)


# ---------------------------------------------------------------------------
# Checkerboard
# ---------------------------------------------------------------------------


class TestCheckerboard:
    def test_creates_image_when_empty(self, workspace):
        board = workspace.checkerboard(1, 2)
        image = workspace.current_image
        assert image.layer_names == ["checkerboard"]
        assert image.layer("checkerboard").image is board
        assert (image.width, image.height) == (2, 2)

    def test_adds_layer_to_current_image(self, workspace):
        _with_layer(workspace, uniform_picture(4, 4))
        workspace.checkerboard(2, 2, name="board")
        assert workspace.current_image.layer_names == ["base", "board"]
        assert len(workspace.images) == 1

    def test_size_mismatch_rejected(self, workspace):
        _with_layer(workspace, uniform_picture(4, 4))
        with pytest.raises(InvalidArgumentError):
            workspace.checkerboard(1, 3)

    def test_duplicate_name_rejected(self, workspace):
        workspace.checkerboard(1, 2)
        with pytest.raises(InvalidArgumentError):
            workspace.checkerboard(1, 2)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestFiles:
    def test_load_into_current_layer(self, workspace, tmp_path):
        pic = random_picture(3, 3)
        write_ppm(pic, tmp_path / "in.ppm")
        workspace.new_image()
        workspace.create_layer("bg")
        workspace.set_current_layer("bg")
        assert workspace.load(tmp_path / "in.ppm") == pic
        assert workspace.current_image.current_image == pic

    def test_load_needs_layer(self, workspace, tmp_path):
        workspace.new_image()
        with pytest.raises(InvalidStateError):
            workspace.load(tmp_path / "in.ppm")

    def test_load_missing_file(self, workspace, tmp_path):
        _with_layer(workspace, uniform_picture(1, 1))
        with pytest.raises(ImageNotFoundError):
            workspace.load(tmp_path / "missing.ppm")

    def test_save_top_most_visible(self, workspace, tmp_path, three_layers):
        workspace.add_image(three_layers)
        workspace.save(tmp_path / "out.ppm")
        assert read_ppm(tmp_path / "out.ppm") == uniform_picture(2, 2, (1, 2, 3))

    def test_save_with_explicit_format(self, workspace, tmp_path, three_layers):
        workspace.add_image(three_layers)
        workspace.save(tmp_path / "out.img", "png")
        assert (tmp_path / "out.img").read_bytes()[:4] == b"\x89PNG"

    def test_save_nothing_visible(self, workspace, tmp_path):
        workspace.new_image()
        workspace.create_layer("bg")
        with pytest.raises(InvalidStateError):
            workspace.save(tmp_path / "out.ppm")

    def test_save_all_and_open_layered(self, workspace, tmp_path, three_layers):
        workspace.add_image(three_layers)
        workspace.save_all(tmp_path / "stack.txt")
        assert (tmp_path / "B.ppm").exists()

        opened = workspace.open_layered(tmp_path / "stack.txt")
        assert len(workspace.images) == 2
        assert workspace.images[1] is opened
        assert opened.layer_names == ["B", "C"]
        assert opened.layer("B").image == three_layers.layer("B").image


def test_create_workspace_uses_seed():
    a = create_workspace(seed=SEED)
    b = create_workspace(seed=SEED)
    assert a.images == []
    assert a.rng.integers(1_000_000) == b.rng.integers(1_000_000)
