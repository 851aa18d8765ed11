"""Webhook ingestion endpoint."""
from __future__ import annotations

import structlog
from aiohttp import web

from webhook_inspector.aiohttp_app import WEBHOOK_PATH_PREFIX
from webhook_inspector.api.utils import collect_headers, json_error
from webhook_inspector.core.exceptions import PersistenceError
from webhook_inspector.services.dependencies import get_ingestion_service

logger = structlog.get_logger(__name__)

routes = web.RouteTableDef()


async def _read_body(request: web.Request) -> str:
    raw = await request.read()
    try:
        return raw.decode(request.charset or "utf-8", errors="replace")
    except LookupError:
        # unknown charset label in Content-Type
        return raw.decode("utf-8", errors="replace")


@routes.get(WEBHOOK_PATH_PREFIX, allow_head=False)
@routes.post(WEBHOOK_PATH_PREFIX)
@routes.get(WEBHOOK_PATH_PREFIX + "/{path:.*}", allow_head=False)
@routes.post(WEBHOOK_PATH_PREFIX + "/{path:.*}")
async def receive_webhook(request: web.Request) -> web.Response:
    """Capture a delivery; GET deliveries carry no body."""
    body = await _read_body(request) if request.method == "POST" else None
    service = await get_ingestion_service(request)
    try:
        receipt = await service.handle_delivery(
            method=request.method,
            url=str(request.url),
            headers=collect_headers(request.headers),
            body=body,
        )
    except PersistenceError:
        logger.exception("Webhook capture failed")
        return json_error("Failed to process webhook", 500)
    return web.json_response(receipt.to_payload())
