"""Middleware for trace_id and request_id logging."""
from __future__ import annotations

import time
from typing import Iterable, Mapping
from uuid import UUID, uuid4

import structlog
from aiohttp import web

TRACE_ID_HEADER = "X-Trace-Id"
REQUEST_ID_HEADER = "X-Request-Id"

logger = structlog.get_logger(__name__)

# Never written to logs
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "x-auth-token",
    }
)


def is_valid_uuid(value: str) -> bool:
    """Check if string is a valid UUID."""
    try:
        UUID(value)
        return True
    except (ValueError, AttributeError):
        return False


def get_safe_headers(headers: Mapping[str, str], sensitive: Iterable[str] = SENSITIVE_HEADERS) -> dict:
    """Get headers dict with sensitive headers filtered out."""
    hidden = {name.lower() for name in sensitive}
    return {key: value for key, value in headers.items() if key.lower() not in hidden}


def create_trace_middleware(service_name: str, *, extra_sensitive_headers: Iterable[str] = ()):
    """Create trace middleware with specified service name."""
    sensitive = SENSITIVE_HEADERS | {name.lower() for name in extra_sensitive_headers}

    @web.middleware
    async def trace_middleware(request: web.Request, handler):
        """Bind trace_id/request_id to the log context and log the request lifecycle."""
        start_time = time.monotonic()

        trace_id = request.headers.get(TRACE_ID_HEADER)
        if not trace_id or not is_valid_uuid(trace_id):
            trace_id = str(uuid4())

        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not request_id or not is_valid_uuid(request_id):
            request_id = str(uuid4())

        request["trace_id"] = trace_id
        request["request_id"] = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            trace_id=trace_id,
            request_id=request_id,
            service=service_name,
            method=request.method,
            path=request.path,
        )

        logger.info(
            "Incoming request",
            url=str(request.url),
            query_string=request.query_string or None,
            remote=request.remote,
            content_length=request.content_length,
            headers=get_safe_headers(request.headers, sensitive),
        )

        try:
            response = await handler(request)
        except web.HTTPException as e:
            logger.warning(
                "Request failed with HTTP exception",
                status_code=e.status_code,
                duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                error=str(e),
            )
            raise
        except Exception as e:
            logger.error(
                "Request failed with exception",
                duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise
        else:
            duration_ms = round((time.monotonic() - start_time) * 1000, 2)
            if response.status >= 400:
                logger.warning("Request completed with error status", status_code=response.status, duration_ms=duration_ms)
            else:
                logger.info("Request completed", status_code=response.status, duration_ms=duration_ms)

            # Streamed responses already sent their headers
            if not response.prepared:
                response.headers[TRACE_ID_HEADER] = trace_id
                response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    return trace_middleware
