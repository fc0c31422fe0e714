"""Tests for the per-client rate limiter."""
from __future__ import annotations

import pytest
from fastapi.responses import PlainTextResponse
from starlette.requests import Request

from functions.middleware.rate_limit import RateLimitMiddleware


async def _ok_app(scope, receive, send):
    await PlainTextResponse("ok")(scope, receive, send)


def _request(client_ip: str) -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/helloWorld",
        "raw_path": b"/api/helloWorld",
        "root_path": "",
        "scheme": "http",
        "query_string": b"",
        "headers": [],
        "client": (client_ip, 1234),
        "server": ("test", 80),
    })


async def _call_next(request):
    return PlainTextResponse("ok")


def test_limit_applies_per_client():
    limiter = RateLimitMiddleware(_ok_app, max_requests=2, window_seconds=10)
    start = limiter._last_sweep

    assert limiter.admit("10.0.0.1", start + 1)
    assert limiter.admit("10.0.0.1", start + 2)
    assert not limiter.admit("10.0.0.1", start + 3)
    assert limiter.admit("10.0.0.2", start + 3)

    # The first hit has left the window
    assert limiter.admit("10.0.0.1", start + 11)


def test_idle_clients_are_forgotten():
    limiter = RateLimitMiddleware(_ok_app, max_requests=5, window_seconds=10)
    start = limiter._last_sweep

    for i in range(1000):
        assert limiter.admit(f"10.0.{i // 256}.{i % 256}", start + 1)
    assert len(limiter.hits) == 1000

    assert limiter.admit("192.168.1.1", start + 30)
    assert list(limiter.hits) == ["192.168.1.1"]


def test_active_clients_survive_sweep():
    limiter = RateLimitMiddleware(_ok_app, max_requests=5, window_seconds=10)
    start = limiter._last_sweep

    limiter.admit("10.0.0.1", start + 1)
    limiter.admit("10.0.0.2", start + 9)
    limiter.admit("10.0.0.3", start + 12)

    assert set(limiter.hits) == {"10.0.0.2", "10.0.0.3"}


@pytest.mark.anyio
async def test_dispatch_from_many_clients_does_not_accumulate():
    limiter = RateLimitMiddleware(_ok_app, max_requests=1, window_seconds=0)

    for i in range(200):
        response = await limiter.dispatch(_request(f"10.1.0.{i}"), _call_next)
        assert response.status_code == 200

    assert len(limiter.hits) <= 1


@pytest.mark.anyio
async def test_dispatch_rejects_over_limit():
    limiter = RateLimitMiddleware(_ok_app, max_requests=1, window_seconds=60)

    assert (await limiter.dispatch(_request("10.0.0.1"), _call_next)).status_code == 200
    response = await limiter.dispatch(_request("10.0.0.1"), _call_next)
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
