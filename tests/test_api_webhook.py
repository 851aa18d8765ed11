from __future__ import annotations

import asyncio
import json

import pytest


@pytest.mark.asyncio
async def test_first_delivery_creates_endpoint_and_request(service_client, store):
    resp = await service_client.post("/api/webhook/test", data='{"x":1}')
    assert resp.status == 200
    payload = await resp.json()

    assert payload["data"] == {"x": 1}
    assert isinstance(payload["id"], int)
    assert payload["status"] == "processed"
    assert payload["statusCode"] == 200
    assert payload["timestamp"]

    assert len(store.endpoints) == 1
    endpoint = next(iter(store.endpoints.values()))
    assert endpoint.url.endswith("/api/webhook/test")

    record = store.requests[payload["id"]]
    assert record.status_code == 200
    assert json.loads(record.response)["data"] == {"x": 1}


@pytest.mark.asyncio
async def test_repeat_delivery_reuses_endpoint(service_client, store):
    first = await service_client.post("/api/webhook/test", data='{"x":1}')
    assert first.status == 200
    second = await service_client.post("/api/webhook/test", data="not-json")
    assert second.status == 200
    payload = await second.json()

    assert payload["data"] == "not-json"
    assert len(store.endpoints) == 1
    assert len(store.requests) == 2
    assert json.loads(store.requests[payload["id"]].response)["data"] == "not-json"


@pytest.mark.asyncio
async def test_distinct_paths_are_distinct_endpoints(service_client, store):
    await service_client.post("/api/webhook/a", data="{}")
    await service_client.post("/api/webhook/b", data="{}")
    await service_client.post("/api/webhook", data="{}")

    assert len(store.endpoints) == 3


@pytest.mark.asyncio
async def test_get_delivery_has_no_body(service_client, store):
    resp = await service_client.get("/api/webhook/ping", params={"source": "probe"})
    assert resp.status == 200
    payload = await resp.json()

    assert payload["data"] is None
    record = store.requests[payload["id"]]
    assert record.method == "GET"
    assert record.body is None
    assert store.endpoints[record.endpoint_id].url.endswith("/api/webhook/ping?source=probe")


@pytest.mark.asyncio
async def test_empty_post_body_is_echoed_as_empty_string(service_client, store):
    resp = await service_client.post("/api/webhook/empty")
    assert resp.status == 200
    payload = await resp.json()

    assert payload["data"] == ""
    assert store.requests[payload["id"]].body == ""


@pytest.mark.asyncio
async def test_headers_are_recorded(service_client, store):
    resp = await service_client.post(
        "/api/webhook/headers",
        data="{}",
        headers={"X-Event-Type": "order.created", "Content-Type": "application/json"},
    )
    payload = await resp.json()

    headers = json.loads(store.requests[payload["id"]].headers)
    assert headers["x-event-type"] == "order.created"
    assert headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_store_failure_returns_generic_error(service_client, store):
    store.fail = True

    resp = await service_client.post("/api/webhook/test", data='{"x":1}')

    assert resp.status == 500
    assert await resp.json() == {"error": "Failed to process webhook"}
    assert store.requests == {}


@pytest.mark.asyncio
async def test_concurrent_deliveries_share_one_endpoint(service_client, store):
    responses = await asyncio.gather(
        *(service_client.post("/api/webhook/burst", data=str(i)) for i in range(5))
    )

    assert [r.status for r in responses] == [200] * 5
    assert len(store.endpoints) == 1
    assert len(store.requests) == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("depth", [300, 600])
async def test_deeply_nested_json_is_captured(service_client, store, depth):
    body = "[" * depth + "]" * depth

    resp = await service_client.post("/api/webhook/deep", data=body)

    assert resp.status == 200
    payload = await resp.json()
    assert payload["data"] == json.loads(body)
    record = store.requests[payload["id"]]
    assert record.body == body
    assert json.loads(record.response)["data"] == json.loads(body)
