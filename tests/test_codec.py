# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Tests for the frame wire codec."""

import pytest

from image_toggle.frames.exceptions import FrameFormatError
from image_toggle.streaming.codec import FRAME_HDR, FRAME_MAGIC, decode_frame, encode_frame

from .helpers import blank_frame, make_frame


class TestFrameCodec:
    """Tests for encode_frame / decode_frame."""

    def test_header_fields_survive(self):
        frame = make_frame([[[1, 2, 3], [4, 5, 6]]], "rgb8", seq=9, stamp=1.25, frame_id="cam_left")

        decoded = decode_frame(encode_frame(frame))

        assert decoded == frame

    def test_message_layout(self):
        """Header, label, frame_id and payload appear in that order."""
        frame = make_frame([[7]], "mono8", frame_id="c")

        message = encode_frame(frame)

        assert message[:4] == FRAME_MAGIC
        assert message[FRAME_HDR.size:] == b"mono8" + b"c" + b"\x07"

    def test_unsupported_channel_count_still_decodes(self):
        """The codec carries any channel count; rejection is the converter's job."""
        frame = blank_frame(1, 2, 5, encoding="weird")

        assert decode_frame(encode_frame(frame)).channels == 5

    def test_short_message(self):
        with pytest.raises(FrameFormatError, match="header"):
            decode_frame(b"IMGF")

    def test_bad_magic(self):
        message = bytearray(encode_frame(make_frame([[1]], "mono8")))
        message[:4] = b"NOPE"

        with pytest.raises(FrameFormatError, match="magic"):
            decode_frame(bytes(message))

    def test_bad_version(self):
        message = bytearray(encode_frame(make_frame([[1]], "mono8")))
        message[4] = 2

        with pytest.raises(FrameFormatError, match="version"):
            decode_frame(bytes(message))

    def test_truncated_payload(self):
        message = encode_frame(make_frame([[1, 2], [3, 4]], "mono8"))

        with pytest.raises(FrameFormatError, match="expected 4"):
            decode_frame(message[:-1])

    def test_trailing_bytes(self):
        message = encode_frame(make_frame([[1, 2], [3, 4]], "mono8"))

        with pytest.raises(FrameFormatError, match="expected 4"):
            decode_frame(message + b"\x00")
