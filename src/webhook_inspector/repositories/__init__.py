"""Repository package exports."""

from webhook_inspector.repositories.endpoints import EndpointRepository
from webhook_inspector.repositories.requests import RequestRepository

__all__ = [
    "EndpointRepository",
    "RequestRepository",
]
