from __future__ import annotations

import pytest
from aiohttp import web

from webhook_inspector.aiohttp_app import create_base_app
from webhook_inspector.middleware.trace import get_safe_headers, is_valid_uuid
from webhook_inspector.settings import Settings


@pytest.fixture
async def bare_client(aiohttp_client):
    app, _cors = create_base_app(Settings())

    async def explode(_request: web.Request) -> web.Response:
        raise RuntimeError("database password is hunter2")

    async def missing(_request: web.Request) -> web.Response:
        raise web.HTTPNotFound()

    app.router.add_get("/explode", explode)
    app.router.add_get("/missing", missing)
    return await aiohttp_client(app)


@pytest.mark.asyncio
async def test_unhandled_error_is_generic_500(bare_client):
    resp = await bare_client.get("/explode")

    assert resp.status == 500
    assert await resp.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_http_errors_pass_through(bare_client):
    resp = await bare_client.get("/missing")
    assert resp.status == 404


def test_sensitive_headers_are_hidden():
    headers = {
        "Authorization": "Bearer x",
        "X-Webhook-Secret": "s",
        "Content-Type": "application/json",
    }

    safe = get_safe_headers(headers, {"authorization", "x-webhook-secret"})

    assert safe == {"Content-Type": "application/json"}


def test_is_valid_uuid():
    assert is_valid_uuid("3f2504e0-4f89-11d3-9a0c-0305e82c3301")
    assert not is_valid_uuid("nope")
