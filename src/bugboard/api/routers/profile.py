"""
bugboard.api.routers.profile

Profile endpoints.

Responsibilities:
- Read and upsert the caller's profile.
- Normalize the team invite list and encrypt the GitHub token on write.
- Bootstrap a profile right after signup (verified against the auth service).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from bugboard.api.deps import auth_client_from_app, db_session, settings_dep
from bugboard.auth.deps import get_identity
from bugboard.auth.models import Identity
from bugboard.auth.secrets import encrypt_secret
from bugboard.auth.session import AuthServiceClient
from bugboard.db.repositories.profiles import ProfileRepo
from bugboard.observability.logging import get_logger
from bugboard.services.board_owner import normalize_invite_list
from bugboard.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])

_TEXT_FIELDS = ("first_name", "last_name", "company", "company_logo_url", "contact_number")


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    company_logo_url: str | None = None
    contact_number: str | None = None
    invite_emails: list[Any] | None = None
    disclaimer_accepted: bool | None = None
    popia_accepted: bool | None = None
    github_token: str | None = Field(default=None, alias="githubToken")


class ProfileBootstrapRequest(BaseModel):
    user_id: str | None = Field(default=None, alias="userId")
    email: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    company: str | None = None
    company_logo_url: str | None = Field(default=None, alias="companyLogoUrl")
    invite_emails: list[Any] | None = Field(default=None, alias="inviteEmails")
    contact_number: str | None = Field(default=None, alias="contactNumber")
    disclaimer_accepted: bool = Field(default=False, alias="disclaimerAccepted")
    popia_accepted: bool = Field(default=False, alias="popiaAccepted")
    github_token: str | None = Field(default=None, alias="githubToken")


def _encrypted_token(raw: str | None, settings: Settings) -> str | None:
    token = (raw or "").strip()
    # An empty token clears the stored one.
    return encrypt_secret(token, raw_key=settings.encryption_key) if token else None


def _strip(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else None


@router.get("")
async def get_profile(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    profile = await ProfileRepo(session).get(identity.user_id)
    return {"profile": profile.to_public() if profile is not None else None}


@router.patch("")
async def update_profile(
    body: ProfileUpdateRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, Any]:
    provided = body.model_dump(exclude_unset=True)
    fields: dict[str, Any] = {}
    for name in _TEXT_FIELDS:
        if name in provided:
            fields[name] = provided[name]
    for name in ("disclaimer_accepted", "popia_accepted"):
        if name in provided:
            fields[name] = bool(provided[name])
    if "invite_emails" in provided:
        fields["invite_emails"] = normalize_invite_list(provided["invite_emails"])
    if "github_token" in provided:
        fields["github_token_enc"] = _encrypted_token(provided["github_token"], settings)
        log.info("github_token_updated", cleared=fields["github_token_enc"] is None)

    profile = await ProfileRepo(session).upsert(
        user_id=identity.user_id, email=identity.email, fields=fields
    )
    await session.commit()
    return {"profile": profile.to_public()}


@router.post("/bootstrap")
async def bootstrap_profile(
    body: ProfileBootstrapRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    auth_client: AuthServiceClient = Depends(auth_client_from_app),
) -> dict[str, bool]:
    if not body.user_id or not body.email:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="userId and email are required")

    user = await auth_client.get_user_by_id(body.user_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    if user.email != body.email:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Email mismatch")

    fields: dict[str, Any] = {name: _strip(getattr(body, name)) for name in _TEXT_FIELDS}
    fields.update(
        invite_emails=normalize_invite_list(body.invite_emails or []),
        disclaimer_accepted=body.disclaimer_accepted,
        popia_accepted=body.popia_accepted,
        github_token_enc=_encrypted_token(body.github_token, settings),
    )
    await ProfileRepo(session).upsert(user_id=body.user_id, email=body.email, fields=fields)
    await session.commit()
    log.info("profile_bootstrapped", user_id=body.user_id)
    return {"success": True}


# --- Module Notes -----------------------------------------------------------
# Responses never include `github_token_enc`; clients only see `has_github_token`.
