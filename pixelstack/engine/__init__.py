"""Pixel-grid algorithms: kernels, pattern generation, mosaic, downsizing.

Submodules are imported directly (``pixelstack.engine.mosaic`` etc.); this
package stays import-free because ``pixelstack.model`` depends on
``pixelstack.engine.kernels``.
"""
