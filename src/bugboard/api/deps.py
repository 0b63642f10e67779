"""
bugboard.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Resolve the caller's board owner once per request.
- Encapsulate app.state access patterns (sessionmaker, auth service client).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bugboard.auth.deps import get_identity
from bugboard.auth.models import Identity
from bugboard.auth.session import AuthServiceClient
from bugboard.services.board_owner import resolve_board_owner_user_id
from bugboard.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app is built with an explicit Settings object; tests pass their own.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def auth_client_from_app(request: Request) -> AuthServiceClient:
    return request.app.state.auth_client  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commits are explicit in handlers/services.
    async with session_factory() as session:
        yield session


async def board_owner_id(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> str:
    return await resolve_board_owner_user_id(session, identity)


# --- Module Notes -----------------------------------------------------------
# `board_owner_id` shares the request's DB session with the handler because
# FastAPI caches `db_session` per request.
