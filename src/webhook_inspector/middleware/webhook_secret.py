"""Optional shared-secret gate for webhook deliveries."""
from __future__ import annotations

import hmac

import structlog
from aiohttp import web

logger = structlog.get_logger(__name__)


def create_webhook_secret_middleware(secret: str, *, header: str, path_prefix: str):
    """Reject deliveries under ``path_prefix`` that do not carry ``secret`` in ``header``."""
    expected = secret.encode("utf-8")

    @web.middleware
    async def webhook_secret_middleware(request: web.Request, handler):
        path = request.path
        if path != path_prefix and not path.startswith(path_prefix + "/"):
            return await handler(request)

        provided = request.headers.get(header)
        if provided is None or not hmac.compare_digest(provided.encode("utf-8"), expected):
            logger.warning("Webhook delivery rejected", reason="secret mismatch" if provided else "secret missing")
            return web.json_response({"error": "Unauthorized", "statusCode": 403}, status=403)
        return await handler(request)

    return webhook_secret_middleware
