# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import math
import time


class RateMeter:
    """Rolling rate/jitter meter using a short timestamp window."""

    def __init__(self, window_s: float = 2.5):
        self.window_s = float(window_s)
        self.ts: list[float] = []

    def tick(self, t: float) -> None:
        """Record a timestamp."""
        self.ts.append(t)
        cut = t - self.window_s
        i = 0
        for i, v in enumerate(self.ts):  # noqa: B007
            if v >= cut:
                break
        if i > 0:
            del self.ts[:i]

    def rate_hz(self) -> float:
        """Calculate current rate in Hz."""
        n = len(self.ts)
        if n < 2:
            return 0.0
        duration = self.ts[-1] - self.ts[0]
        return (n - 1) / duration if duration > 0 else 0.0

    def jitter_ms(self) -> float:
        """Calculate timing jitter in milliseconds."""
        n = len(self.ts)
        if n < 3:
            return 0.0
        diffs = [(self.ts[i] - self.ts[i - 1]) for i in range(1, n)]
        mean = sum(diffs) / len(diffs)
        var = sum((d - mean) ** 2 for d in diffs) / (len(diffs) - 1)
        return math.sqrt(var) * 1000.0

    def clear(self) -> None:
        """Clear all recorded timestamps."""
        self.ts.clear()


class PerformanceTracker:
    """Tracks frame conversion counters for periodic logging."""

    def __init__(self, log_interval_s: float = 5.0):
        self.log_interval_s = log_interval_s
        self.last_log = time.perf_counter()

        self.frame_meter = RateMeter()

        # Counters
        self.frames_in = 0
        self.frames_converted = 0
        self.frames_unsupported = 0
        self.frames_malformed = 0
        self.bytes_out = 0
        self.queue_drops = 0

        # Conversion time aggregates (ms)
        self.convert_total_ms = 0.0
        self.convert_max_ms = 0.0

    def record_frame_in(self) -> None:
        """Record a frame arriving on the input topic."""
        self.frame_meter.tick(time.perf_counter())
        self.frames_in += 1

    def record_converted(self, byte_count: int, elapsed_ms: float) -> None:
        """Record a converted and published frame."""
        self.frames_converted += 1
        self.bytes_out += byte_count
        self.convert_total_ms += elapsed_ms
        if elapsed_ms > self.convert_max_ms:
            self.convert_max_ms = elapsed_ms

    def record_unsupported(self) -> None:
        """Record a frame dropped for its channel count."""
        self.frames_unsupported += 1

    def record_malformed(self) -> None:
        """Record a frame dropped because it could not be decoded."""
        self.frames_malformed += 1

    def record_queue_drop(self, count: int = 1) -> None:
        """Record frames dropped by slow subscribers."""
        self.queue_drops += count

    def should_log(self) -> bool:
        """Check if it's time to log metrics."""
        return (time.perf_counter() - self.last_log) >= self.log_interval_s

    def get_metrics_and_reset(self) -> dict:
        """Get current metrics and reset counters."""
        converted = self.frames_converted
        metrics = {
            "fps": self.frame_meter.rate_hz(),
            "frame_jitter_ms": self.frame_meter.jitter_ms(),
            "frames_in": self.frames_in,
            "frames_converted": self.frames_converted,
            "frames_unsupported": self.frames_unsupported,
            "frames_malformed": self.frames_malformed,
            "bytes_out": self.bytes_out,
            "queue_drops": self.queue_drops,
            "convert_avg_ms": (self.convert_total_ms / converted) if converted else 0.0,
            "convert_max_ms": self.convert_max_ms,
        }

        # Reset counters
        self.frames_in = 0
        self.frames_converted = 0
        self.frames_unsupported = 0
        self.frames_malformed = 0
        self.bytes_out = 0
        self.queue_drops = 0
        self.convert_total_ms = 0.0
        self.convert_max_ms = 0.0
        self.last_log = time.perf_counter()

        return metrics
