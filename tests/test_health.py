import pytest


@pytest.mark.asyncio
async def test_healthcheck(service_client):
    response = await service_client.get("/health")
    assert response.status == 200
    payload = await response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "webhook-inspector"


@pytest.mark.asyncio
async def test_openapi_document_served(service_client):
    response = await service_client.get("/openapi.yaml")
    assert response.status == 200
    text = await response.text()
    assert "/api/webhook" in text


@pytest.mark.asyncio
async def test_trace_headers_echoed(service_client):
    trace_id = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
    response = await service_client.get("/health", headers={"X-Trace-Id": trace_id})
    assert response.headers["X-Trace-Id"] == trace_id
    assert response.headers["X-Request-Id"]


@pytest.mark.asyncio
async def test_invalid_trace_id_replaced(service_client):
    response = await service_client.get("/health", headers={"X-Trace-Id": "not-a-uuid"})
    assert response.headers["X-Trace-Id"] != "not-a-uuid"
