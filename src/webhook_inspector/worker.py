"""Periodic in-process background worker.

Usage::

    worker = BackgroundWorker(
        interval_seconds=3600.0,
        tasks=[WorkerTask(name="request_retention", fn=purge_expired_requests)],
    )
    app.on_startup.append(worker.start)
    app.on_cleanup.append(worker.stop)
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

import structlog
from aiohttp import web

logger = structlog.get_logger(__name__)

# A task receives the application and the sweep time (UTC) and returns an
# optional summary, logged when non-empty.
TaskFn = Callable[[web.Application, datetime], Awaitable[str | None]]


@dataclass
class WorkerTask:
    """A named periodic task executed by :class:`BackgroundWorker`."""

    name: str
    fn: TaskFn


_WORKER_TASK_KEY = web.AppKey("background_worker_task", asyncio.Task)


@dataclass
class BackgroundWorker:
    """Runs a list of tasks every ``interval_seconds``.

    A failing task is logged and does not prevent the others from running.
    """

    interval_seconds: float = 60.0
    tasks: Sequence[WorkerTask] = field(default_factory=list)

    async def start(self, app: web.Application) -> None:
        """Create the worker asyncio task. Register with ``app.on_startup``."""
        app[_WORKER_TASK_KEY] = asyncio.create_task(self._loop(app))

    async def stop(self, app: web.Application) -> None:
        """Cancel the worker task. Register with ``app.on_cleanup``."""
        task = app.get(_WORKER_TASK_KEY)
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _loop(self, app: web.Application) -> None:
        logger.info(
            "background_worker started",
            interval_seconds=self.interval_seconds,
            tasks=[t.name for t in self.tasks],
        )

        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                now = datetime.now(timezone.utc)

                for task in self.tasks:
                    try:
                        summary = await task.fn(app, now)
                        if summary:
                            logger.info("background_task completed", task=task.name, summary=summary)
                    except Exception:
                        logger.exception("background_task failed", task=task.name)

            except asyncio.CancelledError:
                logger.info("background_worker stopped")
                raise
