"""aiohttp application helpers: base app, CORS, health and OpenAPI routes."""
from __future__ import annotations

from pathlib import Path

from aiohttp import web
from aiohttp_cors import CorsConfig, ResourceOptions, setup as cors_setup

from webhook_inspector.middleware.errors import error_middleware
from webhook_inspector.middleware.trace import create_trace_middleware
from webhook_inspector.middleware.webhook_secret import create_webhook_secret_middleware
from webhook_inspector.settings import Settings

SETTINGS_KEY = web.AppKey("settings", Settings)

WEBHOOK_PATH_PREFIX = "/api/webhook"

_ALLOWED_HEADERS = (
    "Accept",
    "Accept-Language",
    "Cache-Control",
    "Content-Language",
    "Content-Type",
    "Last-Event-ID",
    "X-Trace-Id",
    "X-Request-Id",
)

_ALLOWED_METHODS = ("GET", "HEAD", "POST", "DELETE", "OPTIONS")

_EXPOSED_HEADERS = ("X-Trace-Id", "X-Request-Id")


def create_base_app(settings: Settings) -> tuple[web.Application, CorsConfig]:
    """Create a base aiohttp app with tracing, error handling and CORS configured."""
    app = web.Application(client_max_size=settings.client_max_size)
    app[SETTINGS_KEY] = settings

    app.middlewares.append(
        create_trace_middleware(
            settings.app_name,
            extra_sensitive_headers=(settings.webhook_secret_header,),
        )
    )
    app.middlewares.append(error_middleware)
    if settings.webhook_secret:
        app.middlewares.append(
            create_webhook_secret_middleware(
                settings.webhook_secret,
                header=settings.webhook_secret_header,
                path_prefix=WEBHOOK_PATH_PREFIX,
            )
        )

    allowed_headers = _ALLOWED_HEADERS + (settings.webhook_secret_header,)
    cors = cors_setup(
        app,
        defaults={
            origin: ResourceOptions(
                allow_credentials=origin != "*",
                expose_headers=_EXPOSED_HEADERS,
                allow_headers=allowed_headers,
                allow_methods=_ALLOWED_METHODS,
            )
            for origin in settings.cors_allowed_origins
        },
    )

    return app, cors


def add_healthcheck(app: web.Application, settings: Settings) -> None:
    """Register a standard health check endpoint."""

    async def healthcheck(_request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "service": settings.app_name, "env": settings.env})

    app.router.add_get("/health", healthcheck)


def add_openapi_spec(app: web.Application, openapi_path: Path) -> None:
    """Register an endpoint that serves the OpenAPI spec."""

    async def openapi_spec(_request: web.Request) -> web.StreamResponse:
        if not openapi_path.exists():
            raise web.HTTPNotFound(text="OpenAPI document not bundled")
        return web.FileResponse(openapi_path, headers={"Content-Type": "application/yaml"})

    app.router.add_get("/openapi.yaml", openapi_spec)


def add_cors_to_routes(app: web.Application, cors: CorsConfig) -> None:
    """Apply CORS configuration to all routes in the app."""
    for route in list(app.router.routes()):
        cors.add(route)
