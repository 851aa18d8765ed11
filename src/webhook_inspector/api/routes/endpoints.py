"""Endpoint listing."""
from __future__ import annotations

import structlog
from aiohttp import web

from webhook_inspector.api.utils import dump_models, json_error
from webhook_inspector.core.exceptions import PersistenceError
from webhook_inspector.services.dependencies import get_request_service

logger = structlog.get_logger(__name__)

routes = web.RouteTableDef()


@routes.get("/api/endpoints")
async def list_endpoints(request: web.Request) -> web.Response:
    service = await get_request_service(request)
    try:
        endpoints = await service.list_endpoints()
    except PersistenceError:
        logger.exception("Failed to fetch endpoints")
        return json_error("Failed to fetch endpoints", 500)
    return web.json_response(dump_models(endpoints))
