"""
bugboard.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert the incoming request into a typed `Identity`.
- Collapse every authentication failure into one uniform 401.
"""

from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED

from bugboard.auth.authenticator import RequestAuthenticator
from bugboard.auth.models import Identity


def authenticator_from_app(request: Request) -> RequestAuthenticator:
    # Built once on app startup in `bugboard.api.app.create_app`.
    return request.app.state.authenticator  # type: ignore[attr-defined]


async def get_identity(request: Request) -> Identity:
    identity = await authenticator_from_app(request).authenticate(request)
    if identity is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return identity


# --- Module Notes -----------------------------------------------------------
# The 401 detail never names the failing cause (missing, expired, bad signature,
# no session).
