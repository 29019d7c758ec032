# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging
import time

from ..frames.buffer import PixelBuffer
from ..frames.convert import FrameConverter
from ..frames.exceptions import FrameFormatError, UnsupportedChannelCount
from ..frames.mode import ModeState
from ..utils.metrics import PerformanceTracker
from .codec import decode_frame
from .topic import FrameTopic


class FrameProcessor:
    """Connects the input topic to the output topic through the converter.

    Every inbound frame causes exactly one conversion attempt and at most one
    published frame. The mode is read once per frame, at conversion time; a
    toggle arriving mid-frame applies to the next frame.
    """

    def __init__(
        self,
        state: ModeState,
        converter: FrameConverter,
        output: FrameTopic,
        tracker: PerformanceTracker | None = None,
        log_metrics: bool = False,
    ):
        self.state = state
        self.converter = converter
        self.output = output
        self.tracker = tracker or PerformanceTracker()
        self.log_metrics = log_metrics
        self._logger = logging.getLogger("streaming")

    def process_message(self, message: bytes) -> PixelBuffer | None:
        """Decode a wire message and process it. Malformed messages are dropped."""
        self.tracker.record_frame_in()
        try:
            frame = decode_frame(message)
        except FrameFormatError as e:
            self._logger.error(f"frame decode failed on {self.output.name}: {e}")
            self.tracker.record_malformed()
            self._maybe_log_metrics()
            return None
        return self._convert_and_publish(frame)

    def process(self, frame: PixelBuffer) -> PixelBuffer | None:
        """Convert one frame under the current mode and publish it.

        Returns the published frame, or None if the frame was dropped.
        """
        self.tracker.record_frame_in()
        return self._convert_and_publish(frame)

    def _convert_and_publish(self, frame: PixelBuffer) -> PixelBuffer | None:
        mode = self.state.get()
        start = time.perf_counter()
        try:
            converted = self.converter.convert(frame, mode)
        except UnsupportedChannelCount as e:
            self._logger.error(f"{e} (encoding={frame.encoding} seq={frame.seq}), frame dropped")
            self.tracker.record_unsupported()
            self._maybe_log_metrics()
            return None
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        drops = self.output.publish(converted)
        if drops:
            self.tracker.record_queue_drop(drops)
        self.tracker.record_converted(len(converted.data), elapsed_ms)

        self._logger.debug(
            f"seq={frame.seq} {frame.width}x{frame.height} {frame.encoding} -> {converted.encoding} "
            f"mode={mode.value} in {elapsed_ms:.2f}ms"
        )
        self._maybe_log_metrics()
        return converted

    def _maybe_log_metrics(self) -> None:
        if not self.tracker.should_log():
            return
        # Counters roll over every interval whether or not they are logged
        m = self.tracker.get_metrics_and_reset()
        if not self.log_metrics:
            return
        self._logger.info(
            f"{self.output.name} fps={m['fps']:.1f} jitter={m['frame_jitter_ms']:.1f}ms "
            f"in={m['frames_in']} out={m['frames_converted']} unsupported={m['frames_unsupported']} "
            f"malformed={m['frames_malformed']} queue_drops={m['queue_drops']} "
            f"convert_avg={m['convert_avg_ms']:.2f}ms convert_max={m['convert_max_ms']:.2f}ms"
        )
