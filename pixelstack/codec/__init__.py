"""Image file codecs: PPM text, Pillow-backed binary formats and the layered manifest."""

from pixelstack.codec.formats import ImageFormat, read_image, write_image
from pixelstack.codec.manifest import LayeredManifest, LayerEntry, read_layered, write_layered
from pixelstack.codec.ppm import decode_ppm, encode_ppm, read_ppm, write_ppm

__all__ = [
    "ImageFormat",
    "read_image",
    "write_image",
    "LayeredManifest",
    "LayerEntry",
    "read_layered",
    "write_layered",
    "decode_ppm",
    "encode_ppm",
    "read_ppm",
    "write_ppm",
]
