"""Captured request repository."""
from __future__ import annotations

from datetime import datetime
from typing import List

from asyncpg import Pool, Record  # type: ignore[import-untyped]

from webhook_inspector.core.exceptions import NotFoundError
from webhook_inspector.domain.models import CapturedRequest, CapturedRequestWithEndpoint, Endpoint
from webhook_inspector.repositories.base import BaseRepository

_LIST_SELECT = """
    SELECT r.*,
           e.url AS endpoint_url,
           e.created_at AS endpoint_created_at
    FROM requests r
    JOIN endpoints e ON e.id = r.endpoint_id
"""


class RequestRepository(BaseRepository):
    """CRUD helpers for requests."""

    def __init__(self, pool: Pool):
        super().__init__(pool)

    @staticmethod
    def _to_model(record: Record) -> CapturedRequest:
        return CapturedRequest.model_validate(dict(record))

    @staticmethod
    def _to_listing(record: Record) -> CapturedRequestWithEndpoint:
        payload = dict(record)
        payload["endpoint"] = Endpoint(
            id=payload["endpoint_id"],
            url=payload.pop("endpoint_url"),
            created_at=payload.pop("endpoint_created_at"),
        )
        return CapturedRequestWithEndpoint.model_validate(payload)

    async def create(
        self,
        *,
        endpoint_id: int,
        method: str,
        headers: str,
        body: str | None,
        response: str,
        status_code: int,
    ) -> CapturedRequest:
        record = await self._fetchrow(
            """
            INSERT INTO requests (endpoint_id, method, headers, body, response, status_code)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
            """,
            endpoint_id,
            method,
            headers,
            body,
            response,
            status_code,
        )
        assert record is not None
        return self._to_model(record)

    async def list_with_endpoint(self, *, endpoint_id: int | None = None) -> List[CapturedRequestWithEndpoint]:
        if endpoint_id is None:
            records = await self._fetch(_LIST_SELECT + " ORDER BY r.created_at DESC, r.id DESC")
        else:
            records = await self._fetch(
                _LIST_SELECT + " WHERE r.endpoint_id = $1 ORDER BY r.created_at DESC, r.id DESC",
                endpoint_id,
            )
        return [self._to_listing(r) for r in records]

    async def delete(self, request_id: int) -> None:
        record = await self._fetchrow(
            "DELETE FROM requests WHERE id = $1 RETURNING id",
            request_id,
        )
        if record is None:
            raise NotFoundError("Request not found")

    async def delete_all(self) -> int:
        return self._affected_rows(await self._execute("DELETE FROM requests"))

    async def delete_created_before(self, created_before: datetime) -> int:
        """Purge requests older than *created_before*. Returns count."""
        result = await self._execute("DELETE FROM requests WHERE created_at < $1", created_before)
        return self._affected_rows(result)
