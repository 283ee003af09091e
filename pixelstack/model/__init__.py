"""Pixel data model: pixels, pictures, layers and layered pictures."""

from pixelstack.model.pixel import Channel, Pixel
from pixelstack.model.picture import Picture
from pixelstack.model.layer import Layer
from pixelstack.model.layered import LayeredPicture

__all__ = [
    "Channel",
    "Pixel",
    "Picture",
    "Layer",
    "LayeredPicture",
]
