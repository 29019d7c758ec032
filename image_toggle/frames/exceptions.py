# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Frame-layer exceptions.

These exceptions give the transport and control layers one consistent set of
errors for everything that can go wrong with a single pixel buffer, without
exposing numpy or codec details to upper layers.

Design Pattern:
    Diagnostic information (channel counts, labels, sizes) is logged by the
    boundary that drops the frame. The exception attributes carry structured
    data for that log line and for counting, not for retry logic: a bad frame
    is terminal for that frame only.
"""


class FrameError(Exception):
    """Base exception for pixel buffer errors.

    Attributes:
        channels: Channel count of the offending buffer, if known
        encoding: Encoding label of the offending buffer, if known
    """

    def __init__(self, message: str, channels: int | None = None, encoding: str | None = None):
        """Initialize frame error.

        Args:
            message: Human-readable error description
            channels: Channel count of the buffer
            encoding: Encoding label of the buffer
        """
        super().__init__(message)
        self.channels = channels
        self.encoding = encoding


class UnsupportedChannelCount(FrameError):
    """Channel count outside {1, 2, 3, 4}.

    Raised by the converter for either target mode. The frame produces no
    output; the mode and subsequent frames are unaffected.
    """

    def __init__(self, channels: int, encoding: str | None = None):
        """Initialize unsupported channel count error.

        Args:
            channels: The rejected channel count
            encoding: Encoding label of the rejected buffer
        """
        super().__init__(f"Unsupported number of channels: {channels}", channels, encoding)


class FrameFormatError(FrameError):
    """Malformed buffer or wire message.

    Raised for:
    - Payload length that does not match width * height * channels
    - Bad magic or unsupported codec version
    - Truncated headers or trailing bytes
    """
