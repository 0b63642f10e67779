"""
bugboard.api.routers.comments

Task comment endpoints, mounted under `/api/tasks/{task_id}/comments`.

Responsibilities:
- List a task's comments oldest-first.
- Add a comment attributed to the caller, not the board owner.
- Refuse access to tasks that are not on the caller's resolved board.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from bugboard.api.deps import board_owner_id, db_session
from bugboard.auth.deps import get_identity
from bugboard.auth.models import Identity
from bugboard.db.repositories.comments import CommentRepo
from bugboard.db.repositories.tasks import TaskRepo

router = APIRouter(prefix="/{task_id}/comments")


class CommentCreateRequest(BaseModel):
    content: str | None = None


async def _require_task_on_board(session: AsyncSession, task_id: uuid.UUID, owner_id: str) -> None:
    if await TaskRepo(session).get_on_board(task_id, owner_id) is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Task not found")


@router.get("")
async def list_comments(
    task_id: uuid.UUID,
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> list[dict[str, Any]]:
    await _require_task_on_board(session, task_id, owner_id)
    return [c.to_dict() for c in await CommentRepo(session).list_for_task(task_id)]


@router.post("", status_code=HTTP_201_CREATED)
async def add_comment(
    task_id: uuid.UUID,
    body: CommentCreateRequest,
    identity: Identity = Depends(get_identity),
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    content = (body.content or "").strip()
    if not content:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Content is required")

    await _require_task_on_board(session, task_id, owner_id)
    # The comment is attributed to the caller, not the board owner.
    comment = await CommentRepo(session).add(
        task_id=task_id, user_id=identity.user_id, user_email=identity.email, content=content
    )
    await session.commit()
    return comment.to_dict()


# --- Module Notes -----------------------------------------------------------
# The task lookup and the comment insert share one request session, so a task
# deleted concurrently surfaces as a foreign-key failure rather than an orphan.
