"""
tests.test_smoke

Smoke tests: the service boots, serves probes, answers CORS preflight, and a
dev-minted token authenticates against a protected endpoint.
"""

from __future__ import annotations

import httpx
import pytest

from bugboard.api.app import create_app
from bugboard.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"


@pytest.mark.asyncio
async def test_cors_preflight(client: httpx.AsyncClient) -> None:
    r = await client.options(
        "/api/tasks",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization,Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")
    assert "POST" in r.headers["access-control-allow-methods"]


@pytest.mark.asyncio
async def test_dev_token_authenticates(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/dev/token", json={"user_id": "user-1", "email": "a@x.com"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json() == {"profile": None}


@pytest.mark.asyncio
async def test_dev_token_hidden_in_prod(tmp_path) -> None:
    settings = Settings(
        env="prod",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'prod.db'}",
        jwt_secret="x" * 40,
    )
    app = create_app(settings=settings)
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            r = await c.post("/api/dev/token", json={"user_id": "user-1"})
            assert r.status_code == 404
