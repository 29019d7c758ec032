# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Tests for FrameProcessor and the service wiring."""

import logging

import pytest

from image_toggle.control.toggle import ToggleHandler
from image_toggle.frames.convert import FrameConverter
from image_toggle.frames.mode import ConversionMode, ModeState
from image_toggle.service import ImageToggleService
from image_toggle.streaming.codec import encode_frame
from image_toggle.streaming.core import FrameProcessor
from image_toggle.streaming.topic import FrameTopic
from image_toggle.utils.metrics import PerformanceTracker

from .helpers import blank_frame, make_frame


@pytest.fixture
def state():
    return ModeState()


@pytest.fixture
def output():
    return FrameTopic("/image_processed")


@pytest.fixture
def processor(state, output):
    return FrameProcessor(state, FrameConverter(), output)


class TestFrameProcessor:
    """Tests for the decode -> convert -> publish path."""

    async def test_converted_frame_is_published(self, state, output, processor):
        sub = output.subscribe()
        state.set(ConversionMode.GRAYSCALE)

        result = processor.process(make_frame([[[0, 0, 0], [0, 0, 0]]], "bgr8"))

        assert result.encoding == "mono8"
        assert (await sub.get()) is result

    async def test_toggle_between_frames(self, state, output, processor):
        """COLOR -> GRAYSCALE -> COLOR gives 3, 1, then 3 channels."""
        sub = output.subscribe()
        toggles = ToggleHandler(state)
        frame = make_frame([[[10, 20, 30]]], "bgr8")

        first = processor.process(frame)
        toggles.handle(True)
        second = processor.process(frame)
        toggles.handle(False)
        third = processor.process(frame)

        assert [f.channels for f in (first, second, third)] == [3, 1, 3]
        assert [(await sub.get()).encoding for _ in range(3)] == ["bgr8", "mono8", "bgr8"]

    def test_unsupported_frame_is_dropped(self, state, output, processor, caplog):
        """No output, an error log line, and the mode is untouched."""
        caplog.set_level(logging.ERROR, logger="streaming")
        sub = output.subscribe()
        state.set(ConversionMode.GRAYSCALE)

        result = processor.process(blank_frame(2, 2, 5))

        assert result is None
        assert sub.pending() == 0
        assert output.published == 0
        assert processor.tracker.frames_unsupported == 1
        assert state.get() is ConversionMode.GRAYSCALE
        assert "Unsupported number of channels: 5" in caplog.text

    def test_next_frame_after_rejection_converts(self, processor):
        processor.process(blank_frame(1, 1, 0))

        assert processor.process(make_frame([[200]], "mono8")).data == bytes([200, 200, 200])

    def test_wire_message_is_decoded(self, processor):
        message = encode_frame(make_frame([[[1, 2, 3, 4]]], "bgra8", seq=5))

        result = processor.process_message(message)

        assert (result.seq, result.encoding, result.data) == (5, "bgr8", b"\x01\x02\x03")

    def test_malformed_message_is_dropped(self, output, processor, caplog):
        caplog.set_level(logging.ERROR, logger="streaming")

        assert processor.process_message(b"garbage") is None
        assert output.published == 0
        assert processor.tracker.frames_malformed == 1
        assert "frame decode failed" in caplog.text

    def test_queue_drops_are_counted(self, state):
        output = FrameTopic("/out", queue_size=1)
        output.subscribe()
        processor = FrameProcessor(state, FrameConverter(), output)

        processor.process(make_frame([[1]], "mono8"))
        processor.process(make_frame([[2]], "mono8"))

        assert processor.tracker.queue_drops == 1

    def test_metrics_are_logged(self, state, output, caplog):
        caplog.set_level(logging.INFO, logger="streaming")
        processor = FrameProcessor(state, FrameConverter(), output, PerformanceTracker(0.0), log_metrics=True)

        processor.process(make_frame([[1]], "mono8"))

        assert "out=1" in caplog.text
        assert processor.tracker.frames_converted == 0  # reset after logging

    def test_metrics_roll_over_when_not_logged(self, state, output, caplog):
        caplog.set_level(logging.INFO, logger="streaming")
        processor = FrameProcessor(state, FrameConverter(), output, PerformanceTracker(0.0), log_metrics=False)

        processor.process(make_frame([[1]], "mono8"))

        assert "out=1" not in caplog.text
        assert processor.tracker.frames_converted == 0

    def test_long_run_keeps_tracker_bounded(self):
        """Conversion timings are aggregated, not kept per frame."""
        service = ImageToggleService()
        tracker = service.processor.tracker
        frame = make_frame([[[1, 2, 3]]], "bgr8")

        for _ in range(1000):
            service.processor.process(frame)

        assert tracker.frames_converted == 1000
        assert not any(isinstance(v, list) for k, v in vars(tracker).items() if k != "frame_meter")
        assert tracker.convert_total_ms >= tracker.convert_max_ms >= 0.0

        tracker.get_metrics_and_reset()

        assert (tracker.convert_total_ms, tracker.convert_max_ms) == (0.0, 0.0)


class TestServiceFromConfig:
    """Tests for building the service from configuration."""

    def test_defaults(self, default_config):
        service = ImageToggleService.from_config(default_config)

        assert service.state.get() is ConversionMode.COLOR
        assert service.input_topic == "/image_raw"
        assert service.output.name == "/image_processed"
        assert service.output.queue_size == 10
        assert service.service_name == "toggle_grayscale"
        assert service.converter.chroma_fill == 0
        assert service.max_frame_bytes == 64 * 1024 * 1024

    def test_overrides(self, default_config):
        default_config.update({
            "convert": {"initial_mode": "grayscale", "chroma_fill": 128},
            "topics": {"output": "/gray", "queue_size": 3, "max_frame_bytes": 4096},
        })

        service = ImageToggleService.from_config(default_config)

        assert service.state.get() is ConversionMode.GRAYSCALE
        assert service.converter.chroma_fill == 128
        assert service.output.name == "/gray"
        assert service.output.queue_size == 3
        assert service.max_frame_bytes == 4096

    def test_toggle_and_frames_share_state(self):
        service = ImageToggleService()

        service.toggle_handler.handle(True)

        assert service.processor.process(make_frame([[[9, 9, 9]]], "bgr8")).encoding == "mono8"
