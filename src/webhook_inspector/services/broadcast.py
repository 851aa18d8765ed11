"""In-process fan-out of live events to connected viewers.

One :class:`BroadcastHub` is created per application and shared by the
ingestion path (``notify``) and the event stream route
(``register`` / ``unregister``). Each viewer is represented by a sink whose
``push`` reports success as a boolean; a sink that reports failure is dropped
from the hub during the same call.
"""
from __future__ import annotations

import asyncio
from typing import Protocol

import structlog
from aiohttp import web

from webhook_inspector.domain.events import BroadcastEvent, ConnectedEvent, serialize_event

logger = structlog.get_logger(__name__)


class Sink(Protocol):
    """Receiving end of one live viewer connection."""

    def push(self, message: str) -> bool:
        """Queue ``message`` without blocking; ``False`` when the sink can no longer accept."""
        ...

    def close(self) -> None:
        ...


class QueueSink:
    """Bounded queue sink read by a single stream handler.

    Overflowing the backlog closes the sink: the viewer is too slow and gets
    disconnected instead of stalling the hub.
    """

    def __init__(self, max_backlog: int = 100):
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=max(1, max_backlog))
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, message: str) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            self.close()
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # drop the backlog so the end-of-stream marker always fits
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def receive(self, timeout: float | None = None) -> str | None:
        """Next queued message, or ``None`` once closed.

        Raises ``asyncio.TimeoutError`` when nothing arrives within ``timeout``.
        """
        if timeout is None:
            return await self._queue.get()
        return await asyncio.wait_for(self._queue.get(), timeout)


class BroadcastHub:
    """Registry of live sinks guarded by an ``asyncio.Lock``.

    ``notify`` holds the lock while pushing, so concurrent notifications reach
    every sink in the order they acquired the lock. Pushes never await, which
    keeps the critical section short.
    """

    def __init__(self) -> None:
        self._sinks: set[Sink] = set()
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._sinks)

    def __contains__(self, sink: object) -> bool:
        return sink in self._sinks

    async def register(self, sink: Sink) -> bool:
        """Add ``sink`` and send it the ``connected`` acknowledgment.

        Returns ``False`` (and leaves the sink unregistered) if the
        acknowledgment cannot be delivered.
        """
        message = serialize_event(ConnectedEvent())
        async with self._lock:
            if not sink.push(message):
                return False
            self._sinks.add(sink)
            count = len(self._sinks)
        logger.info("viewer connected", connections=count)
        return True

    async def unregister(self, sink: Sink) -> None:
        async with self._lock:
            if sink not in self._sinks:
                return
            self._sinks.discard(sink)
            count = len(self._sinks)
        logger.info("viewer disconnected", connections=count)

    async def notify(self, event: BroadcastEvent) -> int:
        """Push ``event`` to every registered sink; returns how many accepted it."""
        message = serialize_event(event)
        async with self._lock:
            failed = [sink for sink in self._sinks if not sink.push(message)]
            for sink in failed:
                self._sinks.discard(sink)
                sink.close()
            delivered = len(self._sinks)
        if failed:
            logger.warning("dropped unresponsive viewers", dropped=len(failed), connections=delivered)
        return delivered

    async def close(self) -> None:
        """Close and forget every sink (application shutdown)."""
        async with self._lock:
            sinks = list(self._sinks)
            self._sinks.clear()
        for sink in sinks:
            sink.close()
        if sinks:
            logger.info("closed viewer connections", count=len(sinks))


BROADCAST_HUB_KEY = web.AppKey("broadcast_hub", BroadcastHub)


async def close_broadcast_hub(app: web.Application) -> None:
    """``on_shutdown`` hook: end open streams so the server can stop."""
    await app[BROADCAST_HUB_KEY].close()
