"""aiohttp application entrypoint."""
from __future__ import annotations

from pathlib import Path

from aiohttp import web

from webhook_inspector.aiohttp_app import (
    add_cors_to_routes,
    add_healthcheck,
    add_openapi_spec,
    create_base_app,
)
from webhook_inspector.api.router import setup_routes
from webhook_inspector.db.migrations import create_migration_runner
from webhook_inspector.db.pool import create_pool_hooks
from webhook_inspector.logging_config import configure_logging
from webhook_inspector.otel import OTEL_PROVIDER_KEY, setup_otel, shutdown_otel
from webhook_inspector.services.broadcast import BROADCAST_HUB_KEY, BroadcastHub, close_broadcast_hub
from webhook_inspector.settings import Settings, settings
from webhook_inspector.workers import create_worker

# Configure structured logging
configure_logging(settings.log_level, settings.log_format)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
OPENAPI_PATH = PROJECT_ROOT / "openapi" / "openapi.yaml"
MIGRATIONS_PATHS = [
    PROJECT_ROOT / "migrations",
    Path("/app/migrations"),  # container layout
]


def create_app(app_settings: Settings | None = None) -> web.Application:
    app_settings = app_settings or settings

    # instrumentation must be installed before the application is constructed
    tracer_provider = setup_otel(app_settings)

    app, cors = create_base_app(app_settings)
    add_healthcheck(app, app_settings)
    add_openapi_spec(app, OPENAPI_PATH)
    setup_routes(app)

    app[BROADCAST_HUB_KEY] = BroadcastHub()

    init_pool, close_pool = create_pool_hooks(app_settings)
    app.on_startup.append(init_pool)
    app.on_startup.append(create_migration_runner(app_settings, MIGRATIONS_PATHS))
    app.on_shutdown.append(close_broadcast_hub)
    app.on_cleanup.append(close_pool)

    worker = create_worker(app_settings)
    if worker is not None:
        app.on_startup.append(worker.start)
        app.on_cleanup.append(worker.stop)

    if tracer_provider is not None:
        app[OTEL_PROVIDER_KEY] = tracer_provider
        app.on_cleanup.append(shutdown_otel)

    add_cors_to_routes(app, cors)
    return app


def main() -> None:
    web.run_app(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
