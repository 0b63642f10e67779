"""
bugboard.services.board_owner

Board-owner resolution for team boards.

Responsibilities:
- Normalize invite lists (trimmed, lowercase, non-empty, unique, order kept).
- Map an authenticated caller to the user id whose board they operate on:
  a caller who manages their own invite list keeps their own board; otherwise
  the oldest profile that invited the caller's email wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.auth.models import Identity
from bugboard.db.repositories.profiles import ProfileRepo
from bugboard.observability.logging import get_logger

log = get_logger(__name__)

def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_invite_list(values: object) -> list[str]:
    if not isinstance(values, (list, tuple)):
        return []
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        email = normalize_email(value)
        if not email or email in seen:
            continue
        seen.add(email)
        out.append(email)
    return out


@dataclass(frozen=True, slots=True)
class InviterProfile:
    user_id: str
    invite_emails: Sequence[str] | None
    created_at: datetime | None


def pick_board_owner(
    *,
    caller: Identity,
    own_invites: Iterable[str] | None,
    other_profiles: Iterable[InviterProfile],
) -> str:
    """
    Pure resolution rule; `resolve_board_owner_user_id` feeds it from the DB.

    Inviters with no `created_at` sort as timestamp 0. Inviters created at the same
    instant keep their input order (no secondary key).
    """

    email = normalize_email(caller.email or "")
    if normalize_invite_list(list(own_invites or [])) or not email:
        return caller.user_id

    inviters = [
        p
        for p in other_profiles
        if p.user_id != caller.user_id
        and email in normalize_invite_list(list(p.invite_emails or []))
    ]
    if not inviters:
        return caller.user_id

    inviters.sort(key=lambda p: p.created_at.timestamp() if p.created_at else 0.0)
    return inviters[0].user_id


async def resolve_board_owner_user_id(session: AsyncSession, caller: Identity) -> str:
    profiles = ProfileRepo(session)
    own_invites = await profiles.invite_emails_for(caller.user_id)
    if normalize_invite_list(own_invites) or not normalize_email(caller.email or ""):
        return caller.user_id

    others = [
        InviterProfile(user_id=uid, invite_emails=invites, created_at=created_at)
        for uid, invites, created_at in await profiles.list_invite_lists_excluding(caller.user_id)
    ]
    owner = pick_board_owner(caller=caller, own_invites=own_invites, other_profiles=others)
    if owner != caller.user_id:
        log.debug("board_owner_resolved", caller=caller.user_id, board_owner=owner)
    return owner


# --- Module Notes -----------------------------------------------------------
# Read-only and re-evaluated on every task/comment request; nothing is cached, so
# invite list edits take effect on the next request.
