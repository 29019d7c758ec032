# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging
from dataclasses import dataclass

from ..frames.mode import ConversionMode, ModeState


GRAYSCALE_MESSAGE = "Switched to grayscale mode."
COLOR_MESSAGE = "Switched to color mode."


@dataclass(frozen=True)
class ToggleRequest:
    """Toggle request: True selects grayscale, False selects color."""

    data: bool


@dataclass(frozen=True)
class ToggleResponse:
    """Toggle acknowledgement. The toggle cannot fail, so success is always True."""

    success: bool
    message: str

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message}


class ToggleHandler:
    """Applies toggle requests to a ModeState."""

    def __init__(self, state: ModeState):
        self.state = state

    def handle(self, data: bool) -> ToggleResponse:
        mode = ConversionMode.from_toggle(data)
        self.state.set(mode)
        message = GRAYSCALE_MESSAGE if mode is ConversionMode.GRAYSCALE else COLOR_MESSAGE
        logging.getLogger("control").info(message)
        return ToggleResponse(success=True, message=message)

    def handle_request(self, request: ToggleRequest) -> ToggleResponse:
        return self.handle(request.data)
