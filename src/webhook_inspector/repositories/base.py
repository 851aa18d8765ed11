"""Shared asyncpg helpers for repositories."""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable

import asyncpg  # type: ignore[import-untyped]

from webhook_inspector.core.exceptions import PersistenceError

STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


class BaseRepository:
    """Thin wrapper over asyncpg pool operations.

    Driver and connection failures surface as ``PersistenceError``.
    """

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[asyncpg.Connection]:
        try:
            async with self._pool.acquire() as conn:
                yield conn
        except asyncpg.ForeignKeyViolationError as exc:
            raise PersistenceError(f"Referenced row does not exist: {exc}") from exc
        except STORAGE_ERRORS as exc:
            raise PersistenceError(str(exc) or type(exc).__name__) from exc

    async def _fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self._connection() as conn:
            return await conn.fetchrow(query, *args)

    async def _fetch(self, query: str, *args: Any) -> Iterable[asyncpg.Record]:
        async with self._connection() as conn:
            return await conn.fetch(query, *args)

    async def _execute(self, query: str, *args: Any) -> str:
        async with self._connection() as conn:
            return await conn.execute(query, *args)

    @staticmethod
    def _affected_rows(status: str) -> int:
        """Row count from a command tag such as ``DELETE 3``."""
        return int(status.split()[-1])
