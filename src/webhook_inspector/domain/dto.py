"""Pydantic DTOs for the ingestion pipeline."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from webhook_inspector.domain.models import CamelModel


class DataEnvelope(CamelModel):
    """Model carrying an arbitrary decoded webhook body in ``data``."""

    data: Any = None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys.

        ``data`` is passed through as decoded, not through the pydantic
        serializer, so its nesting depth is bounded only by the ``json`` module.
        """
        payload = self.model_dump(mode="json", by_alias=True, exclude={"data"})
        return {"data": self.data, **payload}


class SynthesizedResponse(DataEnvelope):
    """Acknowledgment built from a captured body; stored and echoed back."""

    timestamp: datetime
    processed: bool = True


class DeliveryReceipt(DataEnvelope):
    """Synchronous reply returned to the webhook caller."""

    id: int
    timestamp: datetime
    status: Literal["processed"] = "processed"
    status_code: int = 200
