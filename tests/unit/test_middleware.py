"""Raw ASGI middleware: timeout answers 504, request id binds the log context."""

import asyncio

from httpx import ASGITransport, AsyncClient

from taskline.middleware import RequestIDMiddleware, TimeoutMiddleware
from taskline.shared.telemetry.logging import request_id_var


async def _slow_app(scope, receive, send) -> None:
    await asyncio.sleep(5)


async def _echo_request_id_app(scope, receive, send) -> None:
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": request_id_var.get().encode()})


async def test_timeout_returns_504() -> None:
    app = TimeoutMiddleware(_slow_app, timeout_seconds=0.05)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/slow")
    assert response.status_code == 504
    assert response.json()["error"] == "GATEWAY_TIMEOUT"


async def test_request_id_is_bound_for_the_request() -> None:
    app = RequestIDMiddleware(_echo_request_id_app)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/", headers={"X-Request-ID": "abc-1"})
    assert response.text == "abc-1"
    assert response.headers["X-Request-ID"] == "abc-1"
    assert request_id_var.get() == "-"
