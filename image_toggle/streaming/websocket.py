# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import asyncio
import contextlib
import logging

from aiohttp import WSMsgType, web
from aiohttp.web_ws import WebSocketResponse

from ..service import SERVICE_KEY
from .codec import encode_frame


async def input_topic_handler(request: web.Request):
    """Accept encoded frames from a publisher; each binary message is one frame."""
    service = request.app[SERVICE_KEY]
    ws = WebSocketResponse(heartbeat=20.0, autoping=True, max_msg_size=service.max_frame_bytes)
    await ws.prepare(request)

    remote_addr = request.remote or "unknown"
    logging.getLogger('streaming').info(f"publisher connected to {service.input_topic} from {remote_addr}")

    frames = 0
    async for msg in ws:
        if msg.type == WSMsgType.BINARY:
            frames += 1
            service.processor.process_message(msg.data)
        elif msg.type == WSMsgType.TEXT:
            logging.getLogger('streaming').warning(f"text message on {service.input_topic} from {remote_addr} ignored")
        elif msg.type == WSMsgType.ERROR:
            logging.getLogger('streaming').warning(f'WebSocket error: {ws.exception()}')
            break

    logging.getLogger('streaming').info(f"publisher {remote_addr} left {service.input_topic} after {frames} frames")
    return ws


async def output_topic_handler(request: web.Request):
    """Stream converted frames to a subscriber as binary messages."""
    ws = WebSocketResponse(heartbeat=20.0, autoping=True)
    await ws.prepare(request)

    service = request.app[SERVICE_KEY]
    remote_addr = request.remote or "unknown"
    subscription = service.output.subscribe()
    logging.getLogger('streaming').info(f"subscriber connected to {service.output.name} from {remote_addr}")

    async def _drain_incoming():
        # Subscribers send nothing; reading detects the close handshake
        async for _msg in ws:
            pass

    reader = asyncio.create_task(_drain_incoming())
    try:
        while not ws.closed:
            getter = asyncio.create_task(subscription.get())
            done, _pending = await asyncio.wait({getter, reader}, return_when=asyncio.FIRST_COMPLETED)
            if getter not in done:
                getter.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await getter
                break
            try:
                await ws.send_bytes(encode_frame(getter.result()))
            except (ConnectionResetError, OSError) as e:
                logging.getLogger('streaming').info(f"subscriber {remote_addr} send failed: {e}")
                break
    finally:
        subscription.close()
        reader.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await reader
        logging.getLogger('streaming').info(
            f"subscriber {remote_addr} left {service.output.name} (dropped {subscription.drops} frames)"
        )

    return ws
