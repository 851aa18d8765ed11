from __future__ import annotations

import pytest

from webhook_inspector import main
from webhook_inspector.db.pool import DB_POOL_KEY
from webhook_inspector.services import dependencies
from webhook_inspector.settings import Settings

from tests.fakes import FakeEndpointRepository, FakeRequestRepository, InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        env="development",
        stream_heartbeat_seconds=5.0,
        request_retention_days=0,
        otel_exporter_endpoint=None,
        webhook_secret=None,
    )


@pytest.fixture
def app(monkeypatch, store, app_settings):
    """Application wired to the in-memory store instead of PostgreSQL."""

    def fake_pool_hooks(_settings):
        async def init_pool(app):
            app[DB_POOL_KEY] = store

        async def close_pool(_app):
            return None

        return init_pool, close_pool

    def fake_migration_runner(_settings, _paths, **_kwargs):
        async def apply_migrations_on_startup(_app):
            return None

        return apply_migrations_on_startup

    monkeypatch.setattr(main, "create_pool_hooks", fake_pool_hooks)
    monkeypatch.setattr(main, "create_migration_runner", fake_migration_runner)
    monkeypatch.setattr(dependencies, "EndpointRepository", FakeEndpointRepository)
    monkeypatch.setattr(dependencies, "RequestRepository", FakeRequestRepository)
    return main.create_app(app_settings)


@pytest.fixture
async def service_client(aiohttp_client, app):
    """Test client for calling the service API."""
    return await aiohttp_client(app)
