from __future__ import annotations

from datetime import UTC, datetime

import pytest
from fastapi import FastAPI

from bugboard.auth.models import Identity
from bugboard.services.board_owner import (
    InviterProfile,
    normalize_invite_list,
    pick_board_owner,
    resolve_board_owner_user_id,
)

BOB = Identity(user_id="bob", email="Bob@X.com")
T1 = datetime(2024, 1, 1, 9, 0, 0)
T2 = datetime(2024, 6, 1, 9, 0, 0)


def test_normalize_invite_list() -> None:
    values = ["  Bob@X.com ", "bob@x.com", "", "   ", 42, None, "carol@x.com", "BOB@x.com"]
    assert normalize_invite_list(values) == ["bob@x.com", "carol@x.com"]
    assert normalize_invite_list(None) == []
    assert normalize_invite_list("bob@x.com") == []


def test_no_invites_resolves_to_self() -> None:
    others = [InviterProfile("alice", ["carol@x.com"], T1)]
    assert pick_board_owner(caller=BOB, own_invites=[], other_profiles=others) == "bob"


def test_own_invite_list_wins_over_being_invited() -> None:
    others = [InviterProfile("alice", ["bob@x.com"], T1)]
    owner = pick_board_owner(caller=BOB, own_invites=["dave@x.com"], other_profiles=others)
    assert owner == "bob"


def test_caller_without_email_keeps_own_board() -> None:
    caller = Identity(user_id="bob", email="")
    others = [InviterProfile("alice", [""], T1)]
    assert pick_board_owner(caller=caller, own_invites=None, other_profiles=others) == "bob"


def test_oldest_inviter_wins() -> None:
    others = [
        InviterProfile("newer", ["bob@x.com"], T2),
        InviterProfile("older", ["BOB@x.com "], T1),
    ]
    assert pick_board_owner(caller=BOB, own_invites=[], other_profiles=others) == "older"


def test_missing_timestamp_sorts_first() -> None:
    others = [
        InviterProfile("dated", ["bob@x.com"], T1),
        InviterProfile("undated", ["bob@x.com"], None),
    ]
    assert pick_board_owner(caller=BOB, own_invites=[], other_profiles=others) == "undated"


def test_timezone_aware_timestamps_mix_with_missing_ones() -> None:
    others = [
        InviterProfile("newer", ["bob@x.com"], datetime(2024, 6, 1, tzinfo=UTC)),
        InviterProfile("undated", ["bob@x.com"], None),
        InviterProfile("older", ["bob@x.com"], datetime(2024, 1, 1, tzinfo=UTC)),
    ]
    assert pick_board_owner(caller=BOB, own_invites=[], other_profiles=others) == "undated"
    dated = [p for p in others if p.created_at is not None]
    assert pick_board_owner(caller=BOB, own_invites=[], other_profiles=dated) == "older"


def test_callers_own_row_is_never_an_inviter() -> None:
    others = [InviterProfile("bob", ["bob@x.com"], T1)]
    assert pick_board_owner(caller=BOB, own_invites=[], other_profiles=others) == "bob"


@pytest.mark.asyncio
async def test_resolver_reads_profiles(app: FastAPI, add_profile) -> None:
    await add_profile("alice", "alice@x.com", invite_emails=["bob@x.com"], created_at=T1)
    await add_profile("zed", "zed@x.com", invite_emails=["bob@x.com"], created_at=T2)
    await add_profile("bob", "bob@x.com", created_at=T2)

    async with app.state.sessionmaker() as session:
        assert await resolve_board_owner_user_id(session, BOB) == "alice"
        # Not invited anywhere.
        carol = Identity(user_id="carol", email="carol@x.com")
        assert await resolve_board_owner_user_id(session, carol) == "carol"
        # Alice manages a team, so she stays on her own board.
        alice = Identity(user_id="alice", email="alice@x.com")
        assert await resolve_board_owner_user_id(session, alice) == "alice"


@pytest.mark.asyncio
async def test_resolver_without_own_profile(app: FastAPI, add_profile) -> None:
    await add_profile("alice", "alice@x.com", invite_emails=["bob@x.com"], created_at=T1)
    async with app.state.sessionmaker() as session:
        assert await resolve_board_owner_user_id(session, BOB) == "alice"
