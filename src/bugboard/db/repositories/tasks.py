"""
bugboard.db.repositories.tasks

Repository for `Task` entities.

Responsibilities:
- Create tasks on a board owner's board (task key allocated by the caller).
- Fetch, update and delete tasks scoped to a board owner.
- List a board newest-first with per-task comment counts.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import Comment, Task, TaskPriority, TaskStatus, TaskType


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        board_owner_id: str,
        task_key: str,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.backlog,
        priority: TaskPriority = TaskPriority.medium,
        type: TaskType = TaskType.task,
        labels: list[str] | None = None,
        assignee: str = "",
        report_id: uuid.UUID | None = None,
    ) -> Task:
        task = Task(
            user_id=board_owner_id,
            task_key=task_key,
            title=title,
            description=description,
            status=status,
            priority=priority,
            type=type,
            labels=list(labels or []),
            assignee=assignee,
            report_id=report_id,
        )
        self._session.add(task)
        await self._session.flush()
        return task

    async def get_on_board(self, task_id: uuid.UUID, board_owner_id: str) -> Task | None:
        stmt = select(Task).where(Task.id == task_id, Task.user_id == board_owner_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_with_comment_counts(self, board_owner_id: str) -> list[tuple[Task, int]]:
        counts = (
            select(Comment.task_id, func.count(Comment.id).label("n"))
            .group_by(Comment.task_id)
            .subquery()
        )
        stmt = (
            select(Task, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.task_id == Task.id)
            .where(Task.user_id == board_owner_id)
            .order_by(desc(Task.created_at))
        )
        rows = (await self._session.execute(stmt)).all()
        return [(task, int(n)) for task, n in rows]

    async def update(self, task: Task, changes: dict[str, Any]) -> Task:
        for name, value in changes.items():
            setattr(task, name, value)
        await self._session.flush()
        return task

    async def delete(self, task: Task) -> None:
        await self._session.delete(task)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Every lookup is scoped by `board_owner_id`; handlers pass the resolved board
# owner, not the caller.
