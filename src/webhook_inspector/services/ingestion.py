"""Webhook ingestion: capture, persist, acknowledge, announce."""
from __future__ import annotations

import json
from typing import Mapping

import structlog

from webhook_inspector.domain.dto import DeliveryReceipt
from webhook_inspector.domain.events import NewRequestEvent
from webhook_inspector.repositories.endpoints import EndpointRepository
from webhook_inspector.repositories.requests import RequestRepository
from webhook_inspector.services.broadcast import BroadcastHub
from webhook_inspector.services.synthesizer import synthesize_response

logger = structlog.get_logger(__name__)

CAPTURED_STATUS_CODE = 200


class IngestionService:
    """Runs one delivery through registry, store, synthesizer and hub."""

    def __init__(
        self,
        endpoint_repository: EndpointRepository,
        request_repository: RequestRepository,
        hub: BroadcastHub,
    ):
        self._endpoints = endpoint_repository
        self._requests = request_repository
        self._hub = hub

    async def handle_delivery(
        self,
        *,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str | None,
    ) -> DeliveryReceipt:
        """Capture a delivery and return the reply for the caller.

        Storage failures propagate as ``PersistenceError``; the endpoint is
        resolved before the request row is written. Viewers are notified
        before this returns, but their delivery is never awaited.
        """
        endpoint = await self._endpoints.resolve(url)
        synthesized = synthesize_response(body)

        record = await self._requests.create(
            endpoint_id=endpoint.id,
            method=method,
            headers=json.dumps(dict(headers)),
            body=body,
            response=json.dumps(synthesized.to_payload(), separators=(",", ":")),
            status_code=CAPTURED_STATUS_CODE,
        )
        logger.info(
            "webhook captured",
            request_id=record.id,
            endpoint_id=endpoint.id,
            endpoint_url=endpoint.url,
            http_method=method,
            body_length=len(body) if body is not None else None,
        )

        await self._hub.notify(
            NewRequestEvent(
                request_id=record.id,
                endpoint=endpoint.url,
                method=method,
                timestamp=record.created_at,
            )
        )

        return DeliveryReceipt(
            data=synthesized.data,
            id=record.id,
            timestamp=record.created_at,
            status_code=record.status_code,
        )
