"""Route modules."""

from . import (
    endpoints,
    events,
    requests,
    webhook,
)

__all__ = [
    "endpoints",
    "events",
    "requests",
    "webhook",
]
