# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Pixel buffers, conversion mode state and the color/grayscale converter."""

from .buffer import BGR8, ENCODINGS, MONO8, PixelBuffer
from .convert import FrameConverter, bgr_to_luma, yuv_to_bgr
from .exceptions import FrameError, FrameFormatError, UnsupportedChannelCount
from .mode import ConversionMode, ModeState


__all__ = [
    "BGR8",
    "ENCODINGS",
    "MONO8",
    "ConversionMode",
    "FrameConverter",
    "FrameError",
    "FrameFormatError",
    "ModeState",
    "PixelBuffer",
    "UnsupportedChannelCount",
    "bgr_to_luma",
    "yuv_to_bgr",
]
