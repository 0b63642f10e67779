"""
bugboard.auth.session

HTTP client boundary for the backing auth service (Supabase GoTrue API).

Responsibilities:
- Resolve a cookie-held session access token into a user.
- Look up users by id with the service-role key (signup bootstrap).
- Decode the session cookie formats written by supabase-js.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

import httpx

from bugboard.auth.models import Identity
from bugboard.observability.logging import get_logger
from bugboard.settings import Settings

log = get_logger(__name__)

BASE64_COOKIE_PREFIX = "base64-"


class AuthAdminNotConfigured(RuntimeError):
    pass


def access_token_from_cookie(value: str | None) -> str | None:
    """
    Accepts a raw access token, a JSON session object/array, or the
    `base64-`-prefixed JSON written by newer supabase-js versions.
    """

    if not value:
        return None
    raw = value.strip()
    if raw.startswith(BASE64_COOKIE_PREFIX):
        encoded = raw[len(BASE64_COOKIE_PREFIX) :]
        try:
            raw = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None
    if not raw.startswith(("{", "[")):
        return raw or None
    try:
        session = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if isinstance(session, list):
        # Legacy format: [access_token, refresh_token, ...]
        token = session[0] if session else None
    elif isinstance(session, dict):
        token = session.get("access_token")
    else:
        token = None
    return token if isinstance(token, str) and token else None


def _identity_from_user(user: Any) -> Identity | None:
    if not isinstance(user, dict):
        return None
    user_id = user.get("id")
    if not isinstance(user_id, str) or not user_id:
        return None
    email = user.get("email")
    return Identity(user_id=user_id, email=email if isinstance(email, str) else "")


def _api_base(auth_url: str) -> str:
    return f"{auth_url.rstrip('/')}/auth/v1"


class AuthServiceClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    async def get_user(self, access_token: str) -> Identity | None:
        auth_url, anon_key = self._settings.auth_url, self._settings.auth_anon_key
        if not auth_url or not anon_key:
            return None
        try:
            r = await self._http.get(
                f"{_api_base(auth_url)}/user",
                headers={
                    "apikey": anon_key,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            # The session path reports "no user" rather than failing the request.
            log.warning("auth_session_lookup_failed", error=str(e))
            return None
        if r.status_code != 200:
            return None
        try:
            user = r.json()
        except ValueError as e:
            log.warning("auth_session_lookup_failed", error=f"non-JSON response: {e}")
            return None
        return _identity_from_user(user)

    async def get_user_by_id(self, user_id: str) -> Identity | None:
        auth_url, key = self._settings.auth_url, self._settings.auth_service_role_key
        if not auth_url or not key:
            raise AuthAdminNotConfigured("auth_url and auth_service_role_key are required")
        r = await self._http.get(
            f"{_api_base(auth_url)}/admin/users/{user_id}",
            headers={"apikey": key, "Authorization": f"Bearer {key}"},
        )
        if r.status_code == 404:
            return None
        r.raise_for_status()
        return _identity_from_user(r.json())


# --- Module Notes -----------------------------------------------------------
# The HTTP client is owned by the app lifespan (`api/app.py`) and shared across
# requests; tests swap `app.state.auth_client` for an in-memory fake.
