"""In-memory stand-ins for the asyncpg repositories.

They mirror the public surface of ``EndpointRepository`` and
``RequestRepository`` so API tests run without PostgreSQL.
"""
from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timedelta, timezone
from typing import List

from webhook_inspector.core.exceptions import NotFoundError, PersistenceError
from webhook_inspector.domain.models import CapturedRequest, CapturedRequestWithEndpoint, Endpoint


class InMemoryStore:
    """Shared tables; set ``fail`` to make every repository call raise ``PersistenceError``."""

    def __init__(self) -> None:
        self.endpoints: dict[int, Endpoint] = {}
        self.requests: dict[int, CapturedRequest] = {}
        self.fail = False
        self.resolve_conflicts = 0
        self._endpoint_ids = itertools.count(1)
        self._request_ids = itertools.count(1)
        self._ticks = itertools.count()
        self._epoch = datetime.now(timezone.utc)

    def now(self) -> datetime:
        # strictly increasing so ordering assertions are stable
        return self._epoch + timedelta(milliseconds=next(self._ticks))

    def check(self) -> None:
        if self.fail:
            raise PersistenceError("store unavailable")


class FakeEndpointRepository:
    def __init__(self, store: InMemoryStore, *, resolve_attempts: int = 3):
        self._store = store
        self.resolve_attempts = resolve_attempts

    async def get_by_url(self, url: str) -> Endpoint | None:
        self._store.check()
        return next((e for e in self._store.endpoints.values() if e.url == url), None)

    async def resolve(self, url: str) -> Endpoint:
        for _ in range(self.resolve_attempts):
            existing = await self.get_by_url(url)
            if existing is not None:
                return existing
            # lets concurrent callers interleave between lookup and insert
            await asyncio.sleep(0)
            if any(e.url == url for e in self._store.endpoints.values()):
                # unique violation: ON CONFLICT DO NOTHING returns no row
                self._store.resolve_conflicts += 1
                continue
            endpoint = Endpoint(id=next(self._store._endpoint_ids), url=url, created_at=self._store.now())
            self._store.endpoints[endpoint.id] = endpoint
            return endpoint
        raise PersistenceError(f"Could not resolve endpoint after {self.resolve_attempts} attempts")

    async def list_all(self) -> List[Endpoint]:
        self._store.check()
        return sorted(self._store.endpoints.values(), key=lambda e: (e.created_at, e.id), reverse=True)


class FakeRequestRepository:
    def __init__(self, store: InMemoryStore):
        self._store = store

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
        self._store.check()
        if endpoint_id not in self._store.endpoints:
            raise PersistenceError("Referenced row does not exist")
        record = CapturedRequest(
            id=next(self._store._request_ids),
            endpoint_id=endpoint_id,
            method=method,
            headers=headers,
            body=body,
            response=response,
            status_code=status_code,
            created_at=self._store.now(),
        )
        self._store.requests[record.id] = record
        return record

    async def list_with_endpoint(self, *, endpoint_id: int | None = None) -> List[CapturedRequestWithEndpoint]:
        self._store.check()
        rows = [
            CapturedRequestWithEndpoint(
                **r.model_dump(),
                endpoint=self._store.endpoints[r.endpoint_id],
            )
            for r in self._store.requests.values()
            if endpoint_id is None or r.endpoint_id == endpoint_id
        ]
        return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)

    async def delete(self, request_id: int) -> None:
        self._store.check()
        if self._store.requests.pop(request_id, None) is None:
            raise NotFoundError("Request not found")

    async def delete_all(self) -> int:
        self._store.check()
        deleted = len(self._store.requests)
        self._store.requests.clear()
        return deleted

    async def delete_created_before(self, created_before: datetime) -> int:
        self._store.check()
        expired = [rid for rid, r in self._store.requests.items() if r.created_at < created_before]
        for rid in expired:
            del self._store.requests[rid]
        return len(expired)
