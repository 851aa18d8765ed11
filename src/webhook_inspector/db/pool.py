"""Asyncpg connection pool helpers."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

import asyncpg  # type: ignore[import-untyped]
from aiohttp import web

DB_POOL_KEY = web.AppKey("db_pool", asyncpg.Pool)


class SettingsProtocol(Protocol):
    """Protocol for settings objects with database configuration."""

    database_url: Any
    db_pool_size: int


def create_pool_hooks(
    settings: SettingsProtocol,
) -> tuple[
    Callable[[web.Application], Awaitable[None]],
    Callable[[web.Application], Awaitable[None]],
]:
    """Create ``on_startup`` / ``on_cleanup`` hooks owning the app's asyncpg pool."""

    async def init_pool(app: web.Application) -> None:
        """Open the pool and attach it to the application."""
        app[DB_POOL_KEY] = await asyncpg.create_pool(
            dsn=str(settings.database_url),
            max_size=settings.db_pool_size,
        )

    async def close_pool(app: web.Application) -> None:
        """Close the pool on shutdown."""
        pool = app.get(DB_POOL_KEY)
        if pool is not None:
            await pool.close()

    return init_pool, close_pool


def get_pool(app: web.Application) -> asyncpg.Pool:
    """Return the application's pool (raises if startup has not run)."""
    pool = app.get(DB_POOL_KEY)
    if pool is None:
        raise RuntimeError("Database pool not initialized")
    return pool
