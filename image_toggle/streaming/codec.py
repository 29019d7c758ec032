# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import struct

from ..frames.buffer import PixelBuffer
from ..frames.exceptions import FrameFormatError


# Frame message layout (big-endian), one message per websocket binary frame:
#   magic:     b"IMGF"
#   version:   codec version, currently 1
#   channels:  bytes per pixel (one byte per channel)
#   enc_len:   length of the encoding label that follows the header
#   id_len:    length of the UTF-8 frame_id that follows the label
#   width:     pixels per row
#   height:    rows
#   seq:       sender sequence number, copied to the converted frame
#   stamp:     capture time in seconds, copied to the converted frame
# followed by encoding (ASCII), frame_id (UTF-8) and width*height*channels
# payload bytes, row-major.
FRAME_HDR = struct.Struct("!4sBBBBIIId")
FRAME_MAGIC = b"IMGF"
FRAME_VERSION = 1


def encode_frame(frame: PixelBuffer) -> bytes:
    """Serialize a pixel buffer into one frame message."""
    encoding = frame.encoding.encode("ascii")
    frame_id = frame.frame_id.encode("utf-8")
    if len(encoding) > 255 or len(frame_id) > 255:
        raise FrameFormatError("encoding and frame_id must be at most 255 bytes", frame.channels, frame.encoding)

    header = FRAME_HDR.pack(
        FRAME_MAGIC,
        FRAME_VERSION,
        frame.channels,
        len(encoding),
        len(frame_id),
        frame.width,
        frame.height,
        frame.seq & 0xFFFFFFFF,
        frame.stamp,
    )
    return b"".join((header, encoding, frame_id, frame.data))


def decode_frame(message: bytes) -> PixelBuffer:
    """Parse one frame message into a pixel buffer.

    Raises:
        FrameFormatError: bad magic/version, truncated message or trailing bytes
    """
    if len(message) < FRAME_HDR.size:
        raise FrameFormatError(f"message is {len(message)} bytes, header needs {FRAME_HDR.size}")

    magic, version, channels, enc_len, id_len, width, height, seq, stamp = FRAME_HDR.unpack_from(message)
    if magic != FRAME_MAGIC:
        raise FrameFormatError(f"bad magic {magic!r}")
    if version != FRAME_VERSION:
        raise FrameFormatError(f"unsupported frame version {version}")

    view = memoryview(message)
    offset = FRAME_HDR.size
    try:
        encoding = bytes(view[offset:offset + enc_len]).decode("ascii")
        offset += enc_len
        frame_id = bytes(view[offset:offset + id_len]).decode("utf-8")
        offset += id_len
    except UnicodeDecodeError as e:
        raise FrameFormatError(f"undecodable label: {e}", channels) from e

    expected = width * height * channels
    payload = bytes(view[offset:])
    if len(payload) != expected:
        raise FrameFormatError(
            f"payload is {len(payload)} bytes, expected {expected} for {width}x{height}x{channels}",
            channels,
            encoding,
        )

    return PixelBuffer(
        width=width,
        height=height,
        channels=channels,
        encoding=encoding,
        data=payload,
        seq=seq,
        stamp=stamp,
        frame_id=frame_id,
    )
