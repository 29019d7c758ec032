# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import contextlib
import json
import logging
from typing import Dict, Any

from aiohttp import WSMsgType, web
from aiohttp.web_ws import WebSocketResponse

from .protocol import ControlProtocol, ControlSession
from ..service import SERVICE_KEY


def is_benign_disconnect(exc: BaseException) -> bool:
    """Check if an exception represents a benign disconnection."""
    if isinstance(exc, OSError) and getattr(exc, "winerror", None) in (64, 121):
        return True
    if isinstance(exc, ConnectionResetError):
        return True
    return False


class WebSocketControlProtocol(ControlProtocol):
    """aiohttp WebSocket implementation of the control protocol."""

    async def send_response(self, session: ControlSession, response: Dict[str, Any]) -> bool:
        """Send a response back to the WebSocket client."""
        ws = getattr(session, 'websocket', None)
        if not ws or ws.closed:
            return False

        try:
            await ws.send_str(json.dumps(response, separators=(",", ":")))
            return True
        except (ConnectionResetError, OSError):
            return False

    async def send_error(self, session: ControlSession, code: str, message: str) -> bool:
        """Send an error response to the WebSocket client."""
        return await self.send_response(session, {
            "type": "error",
            "code": code,
            "message": message
        })

    async def handle_websocket(self, ws: WebSocketResponse, request: web.Request):
        """Handle a WebSocket connection using aiohttp."""
        remote_addr = request.remote
        session = ControlSession(
            client_id=f"ws-{id(ws)}",
            client_ip=remote_addr if remote_addr else "unknown",
            websocket=ws
        )

        try:
            # Handshake
            hello_successful = await self._handle_handshake(session)
            if not hello_successful:
                return

            logging.getLogger('websocket').info(f"hello from {session.client_ip} dev={session.device_id}")

            # Message loop
            await self._handle_message_loop(session)

        except Exception as exc:
            if is_benign_disconnect(exc):
                reason = str(exc) if exc.args else ''
                logging.getLogger('websocket').info(f"disconnect {session.client_ip} ({type(exc).__name__}: {reason})")
            else:
                logging.getLogger('websocket').warning(f"websocket error from {session.client_ip}: {exc!r}")
        finally:
            self.close_session(session)

    async def _handle_handshake(self, session: ControlSession) -> bool:
        """Handle the initial handshake."""
        ws = session.websocket

        try:
            msg = await ws.receive()
            if msg.type != WSMsgType.TEXT:
                await self.send_error(session, "proto", "expected text message")
                await ws.close(code=4001, message=b"protocol")
                return False

            hello = json.loads(msg.data)
        except ValueError as e:
            await self.send_error(session, "proto", f"invalid hello: {e}")
            with contextlib.suppress(Exception):
                await ws.close(code=4001, message=b"protocol")
            return False

        if not isinstance(hello, dict) or hello.get("type") != "hello":
            await self.send_error(session, "proto", "expect 'hello' first")
            await ws.close(code=4001, message=b"protocol")
            return False

        try:
            await self.handle_hello(session, hello)
        except ValueError as e:
            await self.send_error(session, "proto", f"invalid hello: {e}")
            await ws.close(code=4001, message=b"protocol")
            return False
        return True

    async def _handle_message_loop(self, session: ControlSession) -> None:
        """Handle incoming messages from the WebSocket."""
        ws = session.websocket

        async for msg in ws:
            logging.getLogger('websocket').debug(f"received {msg.type} from {session.client_ip}")

            if msg.type == WSMsgType.TEXT:
                try:
                    data = json.loads(msg.data)
                    if not isinstance(data, dict):
                        raise ValueError("expected a JSON object")
                    await self.dispatch(session, data)
                except ValueError as e:
                    await self.send_error(session, "bad_request", str(e))
                except Exception as e:
                    logging.getLogger('websocket').error(f"control error from {session.client_ip}: {e!r}")
                    await self.send_error(session, "server_error", str(e))

            elif msg.type == WSMsgType.BINARY:
                await self.send_error(session, "proto", "expected text message")
            elif msg.type == WSMsgType.ERROR:
                logging.getLogger('websocket').warning(f'WebSocket error: {ws.exception()}')
                break

        logging.getLogger('websocket').info(f"control loop exited for {session.client_ip}, ws.closed={ws.closed}")


async def websocket_handler(request: web.Request):
    """Handle WebSocket upgrade requests on the control endpoint."""
    ws = WebSocketResponse(
        heartbeat=20.0,  # Send ping every 20 seconds; idle toggle clients are fine
        autoping=True,
    )
    await ws.prepare(request)

    remote_addr = request.remote or "unknown"
    logging.getLogger('websocket').info(f"control connection established from {remote_addr}")

    service = request.app[SERVICE_KEY]
    protocol = WebSocketControlProtocol(service.state, service.toggle_handler)
    await protocol.handle_websocket(ws, request)

    return ws
