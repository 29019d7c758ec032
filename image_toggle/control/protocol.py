# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
import logging
import time

from .fields import ControlFields
from .toggle import ToggleHandler, ToggleRequest
from ..frames.mode import ModeState


SERVER_VERSION = "image-toggle/1.0"


class ControlSession:
    """Represents a client control session."""

    def __init__(self, client_id: str, client_ip: str, **transport):
        self.client_id = client_id
        self.client_ip = client_ip
        self.device_id: Optional[str] = None
        self.toggles = 0
        self.created_at = time.monotonic()
        # Transport handles (e.g. websocket=...) live on the session
        for name, value in transport.items():
            setattr(self, name, value)

    def __repr__(self):
        return f"ControlSession(id={self.client_id}, ip={self.client_ip}, device={self.device_id})"


class ControlProtocol(ABC):
    """Abstract base class for control protocols (WebSocket, HTTP, etc.)."""

    def __init__(self, state: ModeState, toggle_handler: ToggleHandler):
        self.state = state
        self.toggle_handler = toggle_handler
        self.sessions: Dict[str, ControlSession] = {}

    @abstractmethod
    async def send_response(self, session: ControlSession, response: Dict[str, Any]) -> bool:
        """Send a response back to the client. Returns True if successful."""
        pass

    @abstractmethod
    async def send_error(self, session: ControlSession, code: str, message: str) -> bool:
        """Send an error response to the client."""
        pass

    async def dispatch(self, session: ControlSession, data: Dict[str, Any]) -> None:
        """Route one decoded control message to its handler."""
        msg_type = data.get("type")

        if msg_type == "toggle":
            await self.handle_toggle(session, data)
        elif msg_type == "get_mode":
            await self.handle_get_mode(session, data)
        elif msg_type == "ping":
            await self.handle_ping(session, data)
        else:
            await self.send_error(session, "bad_type", f"unknown type {msg_type}")

    async def handle_hello(self, session: ControlSession, params: Dict[str, Any]) -> None:
        """Register the session and acknowledge the handshake."""
        ControlFields.validate_fields(params, "hello")
        session.device_id = str(params.get("device_id", "unknown"))
        self.sessions[session.client_id] = session

        await self.send_response(session, {
            "type": "hello_ack",
            "server_version": SERVER_VERSION
        })

    async def handle_toggle(self, session: ControlSession, params: Dict[str, Any]) -> None:
        """Handle toggle request."""
        ControlFields.validate_fields(params, "toggle")

        logging.getLogger('control').debug(f"toggle data={params['data']} from session {session.client_id}")

        response = self.toggle_handler.handle_request(ToggleRequest(data=params["data"]))
        session.toggles += 1

        await self.send_response(session, {"type": "toggle_ack", **response.to_dict()})

    async def handle_get_mode(self, session: ControlSession, params: Dict[str, Any]) -> None:
        """Report the currently active mode."""
        await self.send_response(session, {"type": "mode", "mode": self.state.get().value})

    async def handle_ping(self, session: ControlSession, params: Dict[str, Any]) -> None:
        """Handle ping request."""
        await self.send_response(session, {"type": "pong", "t": params.get("t")})

    def close_session(self, session: ControlSession) -> None:
        """Forget a session. Mode changes made by it stay in effect."""
        if self.sessions.pop(session.client_id, None) is not None:
            logging.getLogger('control').debug(f"closed {session} after {session.toggles} toggles")
