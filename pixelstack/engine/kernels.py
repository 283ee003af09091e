"""Canonical convolution kernels and color matrices.

Kernels are square with odd side; matrices are 3x3 with one row per output
channel and one column per input channel (R, G, B).
"""

# 3x3 Gaussian approximation; weights sum to 1.
BLUR_KERNEL = (
    (0.0625, 0.125, 0.0625),
    (0.125, 0.25, 0.125),
    (0.0625, 0.125, 0.0625),
)

# 5x5: negative outer ring, positive inner ring, unit center.
SHARPEN_KERNEL = (
    (-0.125, -0.125, -0.125, -0.125, -0.125),
    (-0.125, 0.25, 0.25, 0.25, -0.125),
    (-0.125, 0.25, 1.0, 0.25, -0.125),
    (-0.125, 0.25, 0.25, 0.25, -0.125),
    (-0.125, -0.125, -0.125, -0.125, -0.125),
)

# Rec. 709 luma coefficients, identical for every output channel.
_LUMA = (0.2126, 0.7152, 0.0722)
MONOCHROME_MATRIX = (_LUMA, _LUMA, _LUMA)

SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)
