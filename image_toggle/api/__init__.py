# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""HTTP and WebSocket application."""

from .server import create_app, start_unified_server


__all__ = ["create_app", "start_unified_server"]
