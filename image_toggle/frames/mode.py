# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import threading
from enum import Enum


class ConversionMode(Enum):
    """Target representation for converted frames."""

    COLOR = "color"
    GRAYSCALE = "grayscale"

    @classmethod
    def from_toggle(cls, data: bool) -> "ConversionMode":
        """Map a toggle flag to a mode (True -> GRAYSCALE)."""
        return cls.GRAYSCALE if data else cls.COLOR


class ModeState:
    """Process-lifetime holder of the active conversion mode.

    Written by the toggle path and read by the frame path, possibly from
    different threads. A reader sees either the old or the new mode, never
    anything in between; no ordering is implied between a toggle and a frame
    already being converted.
    """

    def __init__(self, initial: ConversionMode = ConversionMode.COLOR):
        self._lock = threading.Lock()
        self._mode = initial

    def set(self, mode: ConversionMode) -> None:
        """Overwrite the active mode. Redundant sets are allowed."""
        with self._lock:
            self._mode = mode

    def get(self) -> ConversionMode:
        """Return the most recently set mode."""
        with self._lock:
            return self._mode

    def __repr__(self):
        return f"ModeState(mode={self.get().value})"
