# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging

from aiohttp import web

from ..config import Config
from ..control.fields import ControlFields
from ..control.toggle import ToggleRequest
from ..control.websocket import websocket_handler
from ..service import SERVICE_KEY, ImageToggleService
from ..streaming.websocket import input_topic_handler, output_topic_handler


async def health_check_handler(request: web.Request):
    """Simple health check endpoint."""
    service = request.app[SERVICE_KEY]
    return web.json_response({
        "status": "ok",
        "service": "image-toggle",
        "mode": service.state.get().value,
        "subscribers": service.output.subscriber_count,
    })


async def mode_handler(request: web.Request):
    """Report the active conversion mode."""
    service = request.app[SERVICE_KEY]
    return web.json_response({"mode": service.state.get().value})


async def toggle_handler(request: web.Request):
    """HTTP form of the toggle service: {"data": bool} -> {"success", "message"}."""
    service = request.app[SERVICE_KEY]
    try:
        params = await request.json()
        if not isinstance(params, dict):
            raise ValueError("expected a JSON object")
        ControlFields.validate_fields(params, "toggle")
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        return web.json_response({"type": "error", "code": "bad_request", "message": str(e)}, status=400)

    response = service.toggle_handler.handle_request(ToggleRequest(data=params["data"]))
    return web.json_response(response.to_dict())


async def create_app(service: ImageToggleService | None = None):
    """Create and configure the unified HTTP/WebSocket application."""
    if service is None:
        service = ImageToggleService.from_config(Config())

    app = web.Application()
    app[SERVICE_KEY] = service

    # WebSocket endpoints: control channel and frame topics
    app.router.add_get('/control', websocket_handler)
    app.router.add_get(service.input_topic, input_topic_handler)
    app.router.add_get(service.output.name, output_topic_handler)

    # HTTP API endpoints
    app.router.add_post(f'/api/{service.service_name}', toggle_handler)
    app.router.add_get('/api/mode', mode_handler)
    app.router.add_get('/api/system/health', health_check_handler)

    return app


async def start_unified_server(host: str = "0.0.0.0", port: int = 8788, service: ImageToggleService | None = None):
    """Start the unified HTTP/WebSocket server."""
    app = await create_app(service)
    service = app[SERVICE_KEY]

    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, host, port)
    await site.start()

    logging.getLogger('server').info(
        f"Server on http://{host}:{port}/ (control: /control, frames: {service.input_topic} -> {service.output.name}, "
        f"toggle: /api/{service.service_name})"
    )

    return runner
