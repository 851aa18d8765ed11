"""Events pushed to live viewers."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from webhook_inspector.domain.models import CamelModel


class ConnectedEvent(CamelModel):
    type: Literal["connected"] = "connected"


class NewRequestEvent(CamelModel):
    type: Literal["new_request"] = "new_request"
    request_id: int
    endpoint: str
    method: str
    timestamp: datetime


BroadcastEvent = ConnectedEvent | NewRequestEvent


def serialize_event(event: BroadcastEvent) -> str:
    """Compact JSON text of an event, camelCase keys."""
    return event.model_dump_json(by_alias=True)
