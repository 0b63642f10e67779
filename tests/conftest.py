"""
tests.conftest

Shared fixtures: a per-test SQLite database, an app with its lifespan running,
an in-process HTTP client, a fake auth service, and token/profile helpers.
"""

from __future__ import annotations

import base64
from collections.abc import AsyncIterator, Callable
from datetime import datetime

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from bugboard.api.app import build_authenticator, create_app
from bugboard.auth.jwt import JwtConfig, issue_token
from bugboard.auth.models import Identity
from bugboard.db.models import Profile
from bugboard.settings import Settings

JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!!"
ENCRYPTION_KEY = base64.b64encode(bytes(range(32))).decode("ascii")


class FakeAuthService:
    """In-memory stand-in for `AuthServiceClient`."""

    def __init__(self) -> None:
        self.users: dict[str, Identity] = {}
        self.sessions: dict[str, str] = {}
        self.session_lookups = 0

    def add_user(self, user_id: str, email: str, *, session_token: str | None = None) -> None:
        self.users[user_id] = Identity(user_id=user_id, email=email)
        if session_token:
            self.sessions[session_token] = user_id

    async def get_user(self, access_token: str) -> Identity | None:
        self.session_lookups += 1
        user_id = self.sessions.get(access_token)
        return self.users.get(user_id) if user_id else None

    async def get_user_by_id(self, user_id: str) -> Identity | None:
        return self.users.get(user_id)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'bugboard.db'}",
        jwt_secret=JWT_SECRET,
        encryption_key=ENCRYPTION_KEY,
        session_cookie_name="sb-access-token",
    )


@pytest.fixture
def fake_auth() -> FakeAuthService:
    return FakeAuthService()


@pytest_asyncio.fixture
async def app(settings: Settings, fake_auth: FakeAuthService) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan events; drive them explicitly.
    async with app.router.lifespan_context(app):
        app.state.auth_client = fake_auth
        app.state.authenticator = build_authenticator(settings, fake_auth)  # type: ignore[arg-type]
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers(settings: Settings) -> Callable[..., dict[str, str]]:
    def _headers(user_id: str, email: str = "") -> dict[str, str]:
        token = issue_token(cfg=JwtConfig.from_settings(settings), subject=user_id, email=email)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def add_profile(app: FastAPI):
    async def _add(
        user_id: str,
        email: str,
        *,
        invite_emails: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> None:
        async with app.state.sessionmaker() as session:
            session.add(
                Profile(
                    user_id=user_id,
                    email=email,
                    invite_emails=invite_emails or [],
                    created_at=created_at,
                )
            )
            await session.commit()

    return _add
