"""Endpoint registry repository."""
from __future__ import annotations

from typing import List

from asyncpg import Pool, Record  # type: ignore[import-untyped]

from webhook_inspector.core.exceptions import PersistenceError
from webhook_inspector.domain.models import Endpoint
from webhook_inspector.repositories.base import BaseRepository


class EndpointRepository(BaseRepository):
    """Idempotent upsert-by-URL for webhook endpoints."""

    def __init__(self, pool: Pool, *, resolve_attempts: int = 3):
        super().__init__(pool)
        self._resolve_attempts = max(1, resolve_attempts)

    @staticmethod
    def _to_model(record: Record) -> Endpoint:
        return Endpoint.model_validate(dict(record))

    async def get_by_url(self, url: str) -> Endpoint | None:
        record = await self._fetchrow("SELECT * FROM endpoints WHERE url = $1", url)
        return self._to_model(record) if record is not None else None

    async def resolve(self, url: str) -> Endpoint:
        """Return the endpoint for ``url``, creating it on first sight.

        A concurrent creator may win the insert; ``ON CONFLICT DO NOTHING``
        then returns no row and the next pass reads the winner's row.
        """
        for _ in range(self._resolve_attempts):
            existing = await self.get_by_url(url)
            if existing is not None:
                return existing
            record = await self._fetchrow(
                """
                INSERT INTO endpoints (url)
                VALUES ($1)
                ON CONFLICT (url) DO NOTHING
                RETURNING *
                """,
                url,
            )
            if record is not None:
                return self._to_model(record)
        raise PersistenceError(f"Could not resolve endpoint after {self._resolve_attempts} attempts")

    async def list_all(self) -> List[Endpoint]:
        records = await self._fetch("SELECT * FROM endpoints ORDER BY created_at DESC, id DESC")
        return [self._to_model(r) for r in records]
