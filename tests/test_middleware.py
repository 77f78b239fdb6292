"""Tests for the rate limiting middleware."""
from collections import deque

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.middleware import RateLimitMiddleware


def _limited_client(calls):
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, calls=calls, period=60)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    return TestClient(app)


def test_requests_over_limit_are_rejected():
    client = _limited_client(calls=2)

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200
    response = client.get("/ping")

    assert response.status_code == 429
    assert "Rate limit exceeded" in response.json()["detail"]


def test_sweep_forgets_idle_clients():
    """Test clients whose window has emptied are dropped."""
    middleware = RateLimitMiddleware(app=None, calls=5, period=60)
    middleware.clients = {
        "10.0.0.1": deque([100.0, 110.0]),
        "10.0.0.2": deque([150.0]),
        "10.0.0.3": deque(),
    }

    middleware.sweep(now=200.0)

    assert set(middleware.clients) == {"10.0.0.2"}
    assert list(middleware.clients["10.0.0.2"]) == [150.0]


def test_sweep_trims_expired_timestamps():
    middleware = RateLimitMiddleware(app=None, calls=5, period=60)
    middleware.clients = {"10.0.0.1": deque([100.0, 150.0, 190.0])}

    middleware.sweep(now=200.0)

    assert list(middleware.clients["10.0.0.1"]) == [150.0, 190.0]
