"""Tests for the health endpoint and request middleware."""

from httpx import AsyncClient


async def test_health(async_client: AsyncClient):
    response = await async_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "ok"
    assert body["version"]


async def test_request_id_echoed(async_client: AsyncClient):
    response = await async_client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Response-Time" in response.headers


async def test_unknown_route(async_client: AsyncClient):
    response = await async_client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"
