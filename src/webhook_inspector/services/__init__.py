"""Domain services exports."""

from webhook_inspector.services.broadcast import BroadcastHub, QueueSink
from webhook_inspector.services.ingestion import IngestionService
from webhook_inspector.services.requests import RequestService

__all__ = [
    "BroadcastHub",
    "QueueSink",
    "IngestionService",
    "RequestService",
]
