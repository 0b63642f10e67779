"""
bugboard.auth.authenticator

Request authentication ("who is calling").

Responsibilities:
- Run an ordered list of strategies (bearer token, cookie session).
- Stop at the first definitive decision, so an explicitly supplied but
  invalid bearer token never falls back to the cookie session.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from starlette.concurrency import run_in_threadpool
from starlette.requests import HTTPConnection

from bugboard.auth.jwt import JwtVerifier
from bugboard.auth.models import AuthDecision, Identity
from bugboard.auth.session import AuthServiceClient, access_token_from_cookie
from bugboard.observability.logging import get_logger

log = get_logger(__name__)

BEARER_PREFIX = "bearer "


class AuthStrategy(Protocol):
    name: str

    async def __call__(self, conn: HTTPConnection) -> AuthDecision | None:
        """Return None when the strategy does not apply to this request."""
        ...


def extract_bearer_token(conn: HTTPConnection) -> str | None:
    header = conn.headers.get("authorization")
    if not header or not header.lower().startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX) :].strip()


class BearerTokenStrategy:
    name = "bearer"

    def __init__(self, verifier: JwtVerifier) -> None:
        self._verifier = verifier

    async def __call__(self, conn: HTTPConnection) -> AuthDecision | None:
        token = extract_bearer_token(conn)
        if token is None:
            return None
        # Key-set retrieval does blocking I/O on a cache miss.
        claims = await run_in_threadpool(self._verifier.verify, token) if token else None
        if not claims or not claims.get("sub"):
            return AuthDecision.reject()
        email = claims.get("email")
        return AuthDecision(
            identity=Identity(
                user_id=str(claims["sub"]),
                email=email if isinstance(email, str) else "",
            )
        )


class CookieSessionStrategy:
    name = "cookie"

    def __init__(self, client: AuthServiceClient, *, cookie_name: str) -> None:
        self._client = client
        self._cookie_name = cookie_name

    async def __call__(self, conn: HTTPConnection) -> AuthDecision | None:
        token = access_token_from_cookie(conn.cookies.get(self._cookie_name))
        if token is None:
            return None
        return AuthDecision(identity=await self._client.get_user(token))


class RequestAuthenticator:
    def __init__(self, strategies: Sequence[AuthStrategy]) -> None:
        self._strategies = list(strategies)

    async def authenticate(self, conn: HTTPConnection) -> Identity | None:
        for strategy in self._strategies:
            decision = await strategy(conn)
            if decision is None:
                continue
            if decision.identity is None:
                log.info("auth_rejected", strategy=strategy.name)
            return decision.identity
        return None


# --- Module Notes -----------------------------------------------------------
# Route handlers never see which strategy failed; `auth.deps.get_identity`
# collapses every rejection into the same 401 response.
