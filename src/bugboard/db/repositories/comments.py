"""
bugboard.db.repositories.comments

Repository for `Comment` entities.

Responsibilities:
- Append comments to a task.
- List a task's comments oldest-first.
"""

from __future__ import annotations

import uuid

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import Comment


class CommentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self, *, task_id: uuid.UUID, user_id: str, user_email: str, content: str
    ) -> Comment:
        # Comments are append-only (no update/delete routes).
        comment = Comment(task_id=task_id, user_id=user_id, user_email=user_email, content=content)
        self._session.add(comment)
        await self._session.flush()
        return comment

    async def list_for_task(self, task_id: uuid.UUID) -> list[Comment]:
        stmt = select(Comment).where(Comment.task_id == task_id).order_by(asc(Comment.created_at))
        return list((await self._session.execute(stmt)).scalars().all())
