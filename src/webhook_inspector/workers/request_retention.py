"""Worker: purge captured requests past the retention window."""
from __future__ import annotations

from datetime import datetime, timedelta

from aiohttp import web

from webhook_inspector.aiohttp_app import SETTINGS_KEY
from webhook_inspector.db.pool import get_pool
from webhook_inspector.repositories.requests import RequestRepository


async def purge_expired_requests(app: web.Application, now: datetime) -> str | None:
    """Delete requests older than ``request_retention_days``."""
    retention_days = app[SETTINGS_KEY].request_retention_days
    if retention_days <= 0:
        return None
    cutoff = now - timedelta(days=retention_days)
    purged = await RequestRepository(get_pool(app)).delete_created_before(cutoff)
    return f"purged={purged}" if purged else None
