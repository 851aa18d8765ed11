"""Background workers for the webhook inspector.

Each worker module exports an async task function compatible with
:class:`webhook_inspector.worker.WorkerTask`.
"""
from __future__ import annotations

from webhook_inspector.settings import Settings
from webhook_inspector.worker import BackgroundWorker, WorkerTask
from webhook_inspector.workers.request_retention import purge_expired_requests


def create_worker(settings: Settings) -> BackgroundWorker | None:
    """Worker with every enabled task, or ``None`` when nothing is enabled."""
    tasks: list[WorkerTask] = []
    if settings.request_retention_days > 0:
        tasks.append(WorkerTask(name="request_retention", fn=purge_expired_requests))
    if not tasks:
        return None
    return BackgroundWorker(interval_seconds=settings.worker_interval_seconds, tasks=tasks)


__all__ = [
    "create_worker",
    "purge_expired_requests",
]
