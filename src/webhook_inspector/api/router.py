"""API router composition for aiohttp."""
from __future__ import annotations

from aiohttp import web

from webhook_inspector.api.routes import (
    endpoints,
    events,
    requests,
    webhook,
)

ROUTE_MODULES = [
    webhook,
    events,
    requests,
    endpoints,
]


def setup_routes(app: web.Application) -> None:
    """Attach domain routes to the aiohttp application."""
    for module in ROUTE_MODULES:
        app.add_routes(module.routes)
