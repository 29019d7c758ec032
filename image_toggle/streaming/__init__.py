# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Streaming module for image-toggle.

This module handles the frame path:
- Wire encoding of pixel buffers
- Publish/subscribe topics with bounded per-subscriber queues
- Decode -> convert -> publish processing

The websocket endpoints live in streaming.websocket and are imported by the
API server directly.
"""

from .codec import decode_frame, encode_frame
from .core import FrameProcessor
from .topic import FrameTopic, Subscription


__all__ = ["FrameProcessor", "FrameTopic", "Subscription", "decode_frame", "encode_frame"]
