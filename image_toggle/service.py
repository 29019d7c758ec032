# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging

from aiohttp import web

from .config import Config
from .control.toggle import ToggleHandler
from .frames.convert import FrameConverter
from .frames.mode import ConversionMode, ModeState
from .streaming.core import FrameProcessor
from .streaming.topic import FrameTopic
from .utils.metrics import PerformanceTracker


class ImageToggleService:
    """Wires the mode state, converter, toggle handler and frame topics together.

    The frame path and the control path share only the ModeState instance.
    """

    def __init__(
        self,
        state: ModeState | None = None,
        converter: FrameConverter | None = None,
        input_topic: str = "/image_raw",
        output_topic: str = "/image_processed",
        service_name: str = "toggle_grayscale",
        queue_size: int = 10,
        max_frame_bytes: int = 64 * 1024 * 1024,
        log_metrics: bool = False,
        metrics_interval_s: float = 5.0,
    ):
        self.state = state or ModeState()
        self.converter = converter or FrameConverter()
        self.toggle_handler = ToggleHandler(self.state)
        self.input_topic = input_topic
        self.max_frame_bytes = max_frame_bytes
        self.service_name = service_name
        self.output = FrameTopic(output_topic, queue_size)
        self.processor = FrameProcessor(
            self.state,
            self.converter,
            self.output,
            PerformanceTracker(metrics_interval_s),
            log_metrics=log_metrics,
        )

    @classmethod
    def from_config(cls, config: Config) -> "ImageToggleService":
        """Build the service from the loaded configuration."""
        initial = ConversionMode(str(config.get("convert.initial_mode")).lower())
        service = cls(
            state=ModeState(initial),
            converter=FrameConverter(chroma_fill=config.get("convert.chroma_fill")),
            input_topic=config.get("topics.input"),
            output_topic=config.get("topics.output"),
            service_name=config.get("control.service"),
            queue_size=int(config.get("topics.queue_size")),
            max_frame_bytes=int(config.get("topics.max_frame_bytes")),
            log_metrics=bool(config.get("log.metrics")),
            metrics_interval_s=float(config.get("log.rate_ms")) / 1000.0,
        )
        logging.getLogger("service").info(
            f"Image Toggle Service initialized: {service.input_topic} -> {service.output.name}, "
            f"service={service.service_name} mode={initial.value}"
        )
        return service


SERVICE_KEY = web.AppKey("service", ImageToggleService)
