"""Layered interchange: a text manifest plus one image file per layer.

Manifest layout::

    <width> <height> <max_val>
    <layer_name> <true|false> <image_path>     one line per layer, bottom-most first

Image paths are written relative to the manifest's directory and resolved
against it on read.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from pixelstack.codec.formats import ImageFormat, read_image, write_image
from pixelstack.errors import CodecIOError, ImageNotFoundError, InvalidArgumentError
from pixelstack.model.layer import Layer
from pixelstack.model.layered import LayeredPicture

logger = logging.getLogger(__name__)

_BOOLS = {"true": True, "false": False}


def _partial_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.partial")


class LayerEntry(BaseModel):
    name: str
    visible: bool = True
    image_path: str

    @field_validator("name", "image_path")
    @classmethod
    def single_token(cls, v: str) -> str:
        if not v or any(ch.isspace() for ch in v):
            raise ValueError(f"must be non-empty and contain no whitespace, got {v!r}")
        return v

    def to_line(self) -> str:
        return f"{self.name} {str(self.visible).lower()} {self.image_path}"


class LayeredManifest(BaseModel):
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    max_val: int = Field(ge=0)
    layers: list[LayerEntry] = Field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "LayeredManifest":
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            raise InvalidArgumentError("Layered manifest is empty")

        header = lines[0].split()
        if len(header) != 3:
            raise InvalidArgumentError(f"Manifest header must be '<width> <height> <max_val>', got {lines[0]!r}")

        entries = []
        for lineno, line in enumerate(lines[1:], start=2):
            parts = line.split()
            if len(parts) != 3:
                raise InvalidArgumentError(f"Manifest line {lineno} must be '<name> <visible> <path>', got {line!r}")
            name, visible, image_path = parts
            if visible.lower() not in _BOOLS:
                raise InvalidArgumentError(f"Manifest line {lineno}: visibility must be true or false, got {visible!r}")
            entries.append({"name": name, "visible": _BOOLS[visible.lower()], "image_path": image_path})

        try:
            return cls(width=header[0], height=header[1], max_val=header[2], layers=entries)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid layered manifest: {e}") from e

    def to_text(self) -> str:
        lines = [f"{self.width} {self.height} {self.max_val}"]
        lines.extend(entry.to_line() for entry in self.layers)
        return "\n".join(lines) + "\n"


def write_layered(
    layered: LayeredPicture,
    manifest_path: str | Path,
    fmt: ImageFormat | str,
) -> LayeredManifest:
    """Write every non-empty layer as ``<name><ext>`` beside the manifest, then the manifest.

    Files are first written under hidden ``.partial`` names and only moved into
    place once every write has succeeded; on a failed write the partial files
    are removed and nothing at the final paths is touched.
    """
    manifest_path = Path(manifest_path)
    fmt = ImageFormat.parse(fmt)
    directory = manifest_path.parent

    entries = []
    to_write = []
    for layer in layered.layers:
        if layer.image is None:
            logger.warning("Skipping empty layer %r; it has no image to save", layer.name)
            continue
        try:
            entry = LayerEntry(name=layer.name, visible=layer.visible, image_path=f"{layer.name}{fmt.extension}")
        except ValidationError as e:
            raise InvalidArgumentError(f"Layer {layer.name!r} cannot be written to a manifest: {e}") from e
        entries.append(entry)
        to_write.append((layer.image, directory / entry.image_path))

    manifest = LayeredManifest(
        width=layered.width,
        height=layered.height,
        max_val=layered.max_val,
        layers=entries,
    )

    staged: list[tuple[Path, Path]] = []
    try:
        for image, path in to_write:
            partial = _partial_path(path)
            staged.append((partial, path))
            write_image(image, partial, fmt)
        partial = _partial_path(manifest_path)
        staged.append((partial, manifest_path))
        try:
            partial.write_text(manifest.to_text(), encoding="utf-8")
        except OSError as e:
            raise CodecIOError(f"Could not write {manifest_path}: {e}") from e
    except CodecIOError:
        for partial, _ in staged:
            partial.unlink(missing_ok=True)
        raise

    for partial, path in staged:
        try:
            partial.replace(path)
        except OSError as e:
            raise CodecIOError(f"Could not move {partial} to {path}: {e}") from e

    logger.info("Wrote layered image %s (%d layers)", manifest_path, len(entries))
    return manifest


def read_layered(manifest_path: str | Path, fmt: ImageFormat | str | None = None) -> LayeredPicture:
    """Rebuild a LayeredPicture from a manifest and the images it references."""
    manifest_path = Path(manifest_path)
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ImageNotFoundError(f"Layered manifest not found: {manifest_path}") from e
    except OSError as e:
        raise CodecIOError(f"Could not read {manifest_path}: {e}") from e

    manifest = LayeredManifest.parse(text)
    directory = manifest_path.parent

    layers = []
    for entry in manifest.layers:
        path = Path(entry.image_path)
        if not path.is_absolute():
            path = directory / path
        layers.append(Layer(entry.name, read_image(path, fmt), entry.visible))

    layered = LayeredPicture(manifest.width, manifest.height, manifest.max_val, layers)
    logger.info("Read layered image %s (%d layers)", manifest_path, len(layers))
    return layered
