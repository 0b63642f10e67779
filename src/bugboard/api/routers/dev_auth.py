"""
bugboard.api.routers.dev_auth

Local development token minting.

Responsibilities:
- Mint HS256 bearer tokens signed with the shared secret outside prod.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from bugboard.api.deps import settings_dep
from bugboard.auth.jwt import JwtConfig, issue_token
from bugboard.settings import Settings

router = APIRouter(prefix="/api/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    email: str = Field(default="", max_length=320)
    ttl_minutes: int | None = Field(default=None, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")
    if not settings.jwt_secret:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail="jwt_secret is not configured")

    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=body.user_id,
        email=body.email,
        ttl=timedelta(minutes=body.ttl_minutes or settings.dev_jwt_ttl_minutes),
    )
    return DevTokenResponse(access_token=token)


# --- Module Notes -----------------------------------------------------------
# In prod the router answers 404 so the endpoint is indistinguishable from a
# missing route.
