"""Live event stream (Server-Sent Events)."""
from __future__ import annotations

import asyncio

import structlog
from aiohttp import web

from webhook_inspector.aiohttp_app import SETTINGS_KEY
from webhook_inspector.middleware.trace import REQUEST_ID_HEADER, TRACE_ID_HEADER
from webhook_inspector.services.broadcast import QueueSink
from webhook_inspector.services.dependencies import get_broadcast_hub

logger = structlog.get_logger(__name__)

routes = web.RouteTableDef()

HEARTBEAT_FRAME = b": heartbeat\n\n"


def format_sse_frame(message: str) -> bytes:
    """One ``data:`` frame per message; multi-line payloads get one field per line."""
    lines = "".join(f"data: {line}\n" for line in message.split("\n"))
    return (lines + "\n").encode("utf-8")


@routes.get("/api/events")
async def event_stream(request: web.Request) -> web.StreamResponse:
    """
    Stream ``connected`` and ``new_request`` events until the viewer leaves.

    Sends a heartbeat comment after ``stream_heartbeat_seconds`` of silence;
    a failed write ends the stream.
    """
    settings = request.app[SETTINGS_KEY]
    hub = get_broadcast_hub(request)

    resp = web.StreamResponse(
        status=200,
        headers={
            "Content-Type": "text/event-stream",
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
            TRACE_ID_HEADER: request.get("trace_id", ""),
            REQUEST_ID_HEADER: request.get("request_id", ""),
        },
    )
    await resp.prepare(request)

    sink = QueueSink(max_backlog=settings.stream_max_backlog)
    if not await hub.register(sink):
        return resp

    try:
        while True:
            if request.transport is None or request.transport.is_closing():
                break
            try:
                message = await sink.receive(timeout=settings.stream_heartbeat_seconds)
            except asyncio.TimeoutError:
                await resp.write(HEARTBEAT_FRAME)
                continue
            if message is None:
                # dropped by the hub or server shutdown
                break
            await resp.write(format_sse_frame(message))
    except ConnectionResetError:
        logger.info("viewer stream closed by peer")
    finally:
        await hub.unregister(sink)
        sink.close()
    return resp
