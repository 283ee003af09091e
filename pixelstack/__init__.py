"""pixelstack — layered raster image editing core."""

__version__ = "0.1.0"
