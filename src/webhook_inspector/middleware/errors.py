"""Catch-all JSON error middleware."""
from __future__ import annotations

import structlog
from aiohttp import web

logger = structlog.get_logger(__name__)


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Turn unhandled exceptions into a generic 500 without leaking details."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("Unhandled error")
        return web.json_response({"error": "Internal server error"}, status=500)
