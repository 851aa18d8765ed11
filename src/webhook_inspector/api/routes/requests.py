"""Captured request endpoints."""
from __future__ import annotations

import structlog
from aiohttp import web

from webhook_inspector.api.utils import dump_models, json_error, parse_int
from webhook_inspector.core.exceptions import NotFoundError, PersistenceError
from webhook_inspector.services.dependencies import get_request_service

logger = structlog.get_logger(__name__)

routes = web.RouteTableDef()


@routes.get("/api/requests")
async def list_requests(request: web.Request) -> web.Response:
    endpoint_id = parse_int(request.rel_url.query.get("endpointId"), "endpointId")
    service = await get_request_service(request)
    try:
        items = await service.list_requests(endpoint_id=endpoint_id)
    except PersistenceError:
        logger.exception("Failed to fetch requests")
        return json_error("Failed to fetch requests", 500)
    return web.json_response(dump_models(items))


@routes.delete("/api/requests")
async def delete_all_requests(request: web.Request) -> web.Response:
    service = await get_request_service(request)
    try:
        deleted = await service.delete_all_requests()
    except PersistenceError:
        logger.exception("Failed to delete all requests")
        return json_error("Failed to delete all requests", 500)
    logger.info("requests deleted", deleted=deleted)
    return web.json_response({"message": "All requests deleted", "deleted": deleted})


@routes.delete("/api/requests/{request_id}")
async def delete_request(request: web.Request) -> web.Response:
    request_id = parse_int(request.match_info["request_id"], "request id")
    service = await get_request_service(request)
    try:
        await service.delete_request(request_id)
    except NotFoundError:
        return json_error("Request not found", 404)
    except PersistenceError:
        logger.exception("Failed to delete request", request_id=request_id)
        return json_error("Failed to delete request", 500)
    return web.json_response({"message": "Request deleted"})
