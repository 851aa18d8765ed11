"""Read/delete operations over captured requests and endpoints."""
from __future__ import annotations

from typing import List

from webhook_inspector.domain.models import CapturedRequestWithEndpoint, Endpoint
from webhook_inspector.repositories.endpoints import EndpointRepository
from webhook_inspector.repositories.requests import RequestRepository


class RequestService:
    def __init__(self, request_repository: RequestRepository, endpoint_repository: EndpointRepository):
        self._requests = request_repository
        self._endpoints = endpoint_repository

    async def list_requests(self, *, endpoint_id: int | None = None) -> List[CapturedRequestWithEndpoint]:
        return await self._requests.list_with_endpoint(endpoint_id=endpoint_id)

    async def delete_request(self, request_id: int) -> None:
        await self._requests.delete(request_id)

    async def delete_all_requests(self) -> int:
        return await self._requests.delete_all()

    async def list_endpoints(self) -> List[Endpoint]:
        return await self._endpoints.list_all()
