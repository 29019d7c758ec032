# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging
from collections.abc import Callable

import numpy as np

from .buffer import BGR8, MONO8, PixelBuffer, is_rgb_order
from .exceptions import UnsupportedChannelCount
from .mode import ConversionMode


# Fixed-point weights, 14-bit fraction (sum of luma weights is 1 << 14).
_SHIFT = 14
_HALF = 1 << (_SHIFT - 1)

# BT.601 luma: 0.114 B + 0.587 G + 0.299 R
_B2Y = 1868
_G2Y = 9617
_R2Y = 4899

# BT.601 YUV -> RGB: R = Y + 1.140 V', G = Y - 0.395 U' - 0.581 V', B = Y + 2.032 U'
_V2R = 18678
_V2G = -9519
_U2G = -6472
_U2B = 33292

_CHROMA_ZERO = 128


def bgr_to_luma(bgr: np.ndarray) -> np.ndarray:
    """Convert (H, W, 3) BGR uint8 pixels to (H, W) uint8 luma.

    Rounds half up the same way an integer descale does, so a uniform
    gray (v, v, v) maps back to exactly v.
    """
    px = bgr.astype(np.uint32)
    y = px[..., 0] * _B2Y + px[..., 1] * _G2Y + px[..., 2] * _R2Y + _HALF
    return (y >> _SHIFT).astype(np.uint8)


def yuv_to_bgr(y: np.ndarray, u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Convert separate Y, U, V uint8 planes to (H, W, 3) BGR uint8 pixels.

    Chroma planes are offset by 128; results saturate to 0..255.
    """
    luma = y.astype(np.int32)
    du = u.astype(np.int32) - _CHROMA_ZERO
    dv = v.astype(np.int32) - _CHROMA_ZERO

    # numpy >> on signed ints is an arithmetic (flooring) shift
    b = luma + ((du * _U2B + _HALF) >> _SHIFT)
    g = luma + ((dv * _V2G + du * _U2G + _HALF) >> _SHIFT)
    r = luma + ((dv * _V2R + _HALF) >> _SHIFT)

    return np.clip(np.stack([b, g, r], axis=-1), 0, 255).astype(np.uint8)


def _luma_bgr(frame: PixelBuffer) -> np.ndarray:
    """First three channels of a 3/4 channel frame, in B, G, R order for luma weighting."""
    pixels = frame.as_array()[..., :3]
    if is_rgb_order(frame.encoding):
        pixels = pixels[..., ::-1]
    return pixels


class FrameConverter:
    """Converts pixel buffers to the representation of a target mode.

    Dispatch is a closed table per mode keyed by channel count; a count with
    no entry is rejected with UnsupportedChannelCount. Inputs are never
    modified and every call returns a new buffer labelled "mono8" (one
    channel) or "bgr8" (three channels).

    Two-channel input is read as a packed luminance/chroma pair. Only the
    luminance plane is trusted: grayscale output takes it verbatim, and color
    output rebuilds BGR from it with both chroma planes set to chroma_fill.
    The default fill of 0 reproduces the reference output (a strong green
    cast); 128 would give neutral gray.

    Color input in color mode keeps its bytes and channel order whatever its
    label; only the luma weighting reads rgb8/rgba8 as R, G, B.
    """

    def __init__(self, chroma_fill: int = 0):
        if not 0 <= int(chroma_fill) <= 255:
            raise ValueError(f"chroma_fill must be 0..255, got {chroma_fill}")
        self.chroma_fill = int(chroma_fill)
        self._logger = logging.getLogger("convert")

        self._rules: dict[ConversionMode, dict[int, Callable[[PixelBuffer], PixelBuffer]]] = {
            ConversionMode.GRAYSCALE: {
                1: self._gray_from_mono,
                2: self._gray_from_yuv,
                3: self._gray_from_color,
                4: self._gray_from_color,
            },
            ConversionMode.COLOR: {
                1: self._color_from_mono,
                2: self._color_from_yuv,
                3: self._color_from_color,
                4: self._color_from_color,
            },
        }

    def supported_channels(self, mode: ConversionMode) -> tuple[int, ...]:
        """Channel counts accepted for the given target mode."""
        return tuple(sorted(self._rules[mode]))

    def convert(self, frame: PixelBuffer, mode: ConversionMode) -> PixelBuffer:
        """Convert one frame to the representation of the given mode.

        Raises:
            UnsupportedChannelCount: if frame.channels is outside {1, 2, 3, 4}
        """
        rule = self._rules[mode].get(frame.channels)
        if rule is None:
            raise UnsupportedChannelCount(frame.channels, frame.encoding)
        return rule(frame)

    # Target = GRAYSCALE

    def _gray_from_mono(self, frame: PixelBuffer) -> PixelBuffer:
        self._logger.debug("Image is already grayscale.")
        return frame.relabel(MONO8)

    def _gray_from_yuv(self, frame: PixelBuffer) -> PixelBuffer:
        self._logger.debug("Processing 2-channel YUV image for grayscale.")
        return frame.with_pixels(frame.as_array()[..., 0], MONO8)

    def _gray_from_color(self, frame: PixelBuffer) -> PixelBuffer:
        return frame.with_pixels(bgr_to_luma(_luma_bgr(frame)), MONO8)

    # Target = COLOR

    def _color_from_mono(self, frame: PixelBuffer) -> PixelBuffer:
        return frame.with_pixels(np.repeat(frame.as_array(), 3, axis=-1), BGR8)

    def _color_from_yuv(self, frame: PixelBuffer) -> PixelBuffer:
        self._logger.debug("Processing 2-channel YUV image for color.")
        y = frame.as_array()[..., 0]
        chroma = np.full_like(y, self.chroma_fill)
        return frame.with_pixels(yuv_to_bgr(y, chroma, chroma), BGR8)

    def _color_from_color(self, frame: PixelBuffer) -> PixelBuffer:
        if frame.channels == 3:
            return frame.relabel(BGR8)
        # Alpha is dropped; channel order is kept as received
        return frame.with_pixels(frame.as_array()[..., :3], BGR8)
