# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from dataclasses import dataclass, replace

import numpy as np

from .exceptions import FrameFormatError


MONO8 = "mono8"
BGR8 = "bgr8"

# Known labels -> (channels, channel order). All are one byte per channel.
# The header channel count wins over the label; the label only says how to
# read the color channels.
ENCODINGS: dict[str, tuple[int, str]] = {
    "mono8": (1, "gray"),
    "8UC1": (1, "gray"),
    "yuv422": (2, "yuv"),
    "8UC2": (2, "yuv"),
    "bgr8": (3, "bgr"),
    "8UC3": (3, "bgr"),
    "rgb8": (3, "rgb"),
    "bgra8": (4, "bgr"),
    "8UC4": (4, "bgr"),
    "rgba8": (4, "rgb"),
}


def is_rgb_order(encoding: str) -> bool:
    """True if the label stores color channels as R, G, B."""
    known = ENCODINGS.get(encoding)
    return known is not None and known[1] == "rgb"


@dataclass(frozen=True)
class PixelBuffer:
    """One decoded frame: row-major, one byte per channel per pixel."""

    width: int
    height: int
    channels: int
    encoding: str
    data: bytes
    # Header fields carried from input to output unchanged
    seq: int = 0
    stamp: float = 0.0
    frame_id: str = ""

    def __post_init__(self):
        if self.width < 0 or self.height < 0 or self.channels < 0:
            raise FrameFormatError(
                f"negative dimensions {self.width}x{self.height}x{self.channels}",
                self.channels,
                self.encoding,
            )
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise FrameFormatError(
                f"payload is {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{self.channels}",
                self.channels,
                self.encoding,
            )

    @property
    def size(self) -> tuple[int, int]:
        """Get size as (width, height) tuple."""
        return (self.width, self.height)

    def as_array(self) -> np.ndarray:
        """Read-only (height, width, channels) uint8 view of the payload."""
        arr = np.frombuffer(self.data, dtype=np.uint8)
        return arr.reshape((self.height, self.width, self.channels))

    @classmethod
    def from_array(cls, pixels: np.ndarray, encoding: str, **header) -> "PixelBuffer":
        """Build a buffer from an (H, W) or (H, W, C) uint8 array."""
        if pixels.dtype != np.uint8:
            raise FrameFormatError(f"expected uint8 pixels, got {pixels.dtype}", encoding=encoding)
        if pixels.ndim == 2:
            pixels = pixels[..., np.newaxis]
        if pixels.ndim != 3:
            raise FrameFormatError(f"expected 2 or 3 dimensions, got {pixels.ndim}", encoding=encoding)
        height, width, channels = pixels.shape
        return cls(
            width=width,
            height=height,
            channels=channels,
            encoding=encoding,
            data=np.ascontiguousarray(pixels).tobytes(),
            **header,
        )

    def with_pixels(self, pixels: np.ndarray, encoding: str) -> "PixelBuffer":
        """New buffer with this buffer's header and the given pixels."""
        return PixelBuffer.from_array(pixels, encoding, seq=self.seq, stamp=self.stamp, frame_id=self.frame_id)

    def relabel(self, encoding: str) -> "PixelBuffer":
        """Same payload and header under another encoding label."""
        return replace(self, encoding=encoding)
