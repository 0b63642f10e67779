"""
bugboard.db.repositories.profiles

Repository for `Profile` entities.

Responsibilities:
- Fetch a profile by user id.
- Upsert profile fields (profile edits and signup bootstrap).
- List other profiles' invite lists for board-owner resolution.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import Profile


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> Profile | None:
        return await self._session.get(Profile, user_id)

    async def invite_emails_for(self, user_id: str) -> list[str]:
        stmt = select(Profile.invite_emails).where(Profile.user_id == user_id)
        value = (await self._session.execute(stmt)).scalar_one_or_none()
        return list(value) if isinstance(value, list) else []

    async def list_invite_lists_excluding(
        self, user_id: str
    ) -> Sequence[tuple[str, list[str] | None, datetime | None]]:
        # Full scan; team sizes are small and results are not cached between requests.
        stmt = select(Profile.user_id, Profile.invite_emails, Profile.created_at).where(
            Profile.user_id != user_id
        )
        rows = (await self._session.execute(stmt)).all()
        return [(r.user_id, r.invite_emails, r.created_at) for r in rows]

    async def upsert(self, *, user_id: str, email: str, fields: dict[str, Any]) -> Profile:
        profile = await self._session.get(Profile, user_id, with_for_update=True)
        if profile is None:
            profile = Profile(user_id=user_id, email=email, invite_emails=[])
            self._session.add(profile)
        else:
            profile.email = email
        for name, value in fields.items():
            setattr(profile, name, value)
        await self._session.flush()
        return profile


# --- Module Notes -----------------------------------------------------------
# `github_token_enc` is written here already encrypted; this layer never sees
# plaintext tokens.
