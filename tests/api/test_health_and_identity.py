"""Smoke tests for health, request ids and actor resolution."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200, status ok and the version."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"]


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/health", headers={"X-Request-ID": "bad id with spaces"}
    )
    assert response.headers["X-Request-ID"] != "bad id with spaces"
    assert len(response.headers["X-Request-ID"]) == 36


async def test_missing_actor_header_returns_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/tasks/1")
    assert response.status_code == 401
    assert response.json()["error"] == "HTTP_ERROR"


async def test_malformed_actor_header_returns_401(client: AsyncClient) -> None:
    for value in ("alice", "0", "-3"):
        response = await client.get("/api/v1/tasks/1", headers={"X-User-ID": value})
        assert response.status_code == 401, value
