"""Pydantic models representing stored entities."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (``model_dump(by_alias=True)``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Endpoint(CamelModel):
    id: int
    url: str
    created_at: datetime


class CapturedRequest(CamelModel):
    id: int
    endpoint_id: int
    method: str
    headers: str
    body: str | None = None
    response: str
    status_code: int
    created_at: datetime


class CapturedRequestWithEndpoint(CapturedRequest):
    """Listing row: the request joined with the endpoint it was delivered to."""

    endpoint: Endpoint
