"""Shared dependency providers for aiohttp handlers."""
from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from aiohttp import web

from webhook_inspector.aiohttp_app import SETTINGS_KEY
from webhook_inspector.db.pool import get_pool
from webhook_inspector.repositories import EndpointRepository, RequestRepository
from webhook_inspector.services.broadcast import BROADCAST_HUB_KEY, BroadcastHub
from webhook_inspector.services.ingestion import IngestionService
from webhook_inspector.services.requests import RequestService

TService = TypeVar("TService")

_INGESTION_SERVICE_KEY = "ingestion_service"
_REQUEST_SERVICE_KEY = "request_service"


async def _get_or_create_service(
    request: web.Request,
    cache_key: str,
    builder: Callable[[web.Request], Awaitable[TService]],
) -> TService:
    service = request.get(cache_key)
    if service is None:
        service = await builder(request)
        request[cache_key] = service
    return service


def get_broadcast_hub(request: web.Request) -> BroadcastHub:
    return request.app[BROADCAST_HUB_KEY]


def _endpoint_repository(app: web.Application) -> EndpointRepository:
    return EndpointRepository(
        get_pool(app),
        resolve_attempts=app[SETTINGS_KEY].endpoint_resolve_attempts,
    )


async def get_ingestion_service(request: web.Request) -> IngestionService:
    async def builder(req: web.Request) -> IngestionService:
        return IngestionService(
            _endpoint_repository(req.app),
            RequestRepository(get_pool(req.app)),
            get_broadcast_hub(req),
        )

    return await _get_or_create_service(request, _INGESTION_SERVICE_KEY, builder)


async def get_request_service(request: web.Request) -> RequestService:
    async def builder(req: web.Request) -> RequestService:
        return RequestService(RequestRepository(get_pool(req.app)), _endpoint_repository(req.app))

    return await _get_or_create_service(request, _REQUEST_SERVICE_KEY, builder)
