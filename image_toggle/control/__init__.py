# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Control protocol implementations for toggling the conversion mode."""

from .fields import ControlFields
from .protocol import ControlProtocol, ControlSession
from .toggle import ToggleHandler, ToggleRequest, ToggleResponse


__all__ = [
    "ControlFields",
    "ControlProtocol",
    "ControlSession",
    "ToggleHandler",
    "ToggleRequest",
    "ToggleResponse",
]
