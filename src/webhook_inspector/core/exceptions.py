"""Common exceptions for domain and repository layers."""
from __future__ import annotations


class WebhookInspectorError(Exception):
    """Base error for service layer."""


class RepositoryError(WebhookInspectorError):
    """Raised when repository operations fail."""


class PersistenceError(RepositoryError):
    """Raised when the store is unreachable or rejects a write."""


class NotFoundError(RepositoryError):
    """Raised when requested entity is missing."""
