# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Frame builders shared by the tests."""

import numpy as np

from image_toggle.frames.buffer import PixelBuffer


def make_frame(pixels, encoding="bgr8", **header) -> PixelBuffer:
    """Build a PixelBuffer from a nested list or array of uint8 values."""
    return PixelBuffer.from_array(np.asarray(pixels, dtype=np.uint8), encoding, **header)


def blank_frame(width, height, channels, encoding="8UC3", value=0) -> PixelBuffer:
    """Uniform frame of any channel count, including unsupported ones."""
    return PixelBuffer(
        width=width,
        height=height,
        channels=channels,
        encoding=encoding,
        data=bytes([value]) * (width * height * channels),
    )
