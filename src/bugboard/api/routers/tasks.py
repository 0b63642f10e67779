"""
bugboard.api.routers.tasks

Kanban board task endpoints.

Responsibilities:
- List, create, update and delete tasks on the caller's resolved board.
- Allocate task keys through `TaskService` (atomic per-owner counter).
- Mount the task comments sub-resource.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from bugboard.api.deps import board_owner_id, db_session
from bugboard.api.routers.comments import router as comments_router
from bugboard.db.models import TaskPriority, TaskStatus, TaskType
from bugboard.db.repositories.tasks import TaskRepo
from bugboard.services.tasks import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
router.include_router(comments_router)

# Columns that may not be cleared to NULL through PATCH.
_NON_NULLABLE = frozenset(
    {"title", "description", "status", "priority", "type", "labels", "assignee"}
)


class TaskCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=512)
    description: str = ""
    status: TaskStatus = TaskStatus.backlog
    priority: TaskPriority = TaskPriority.medium
    type: TaskType = TaskType.task
    labels: list[str] = Field(default_factory=list)
    assignee: str = ""
    report_id: uuid.UUID | None = None


class TaskUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=512)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    type: TaskType | None = None
    labels: list[str] | None = None
    assignee: str | None = None
    github_repo: str | None = None
    github_issue_url: str | None = None
    github_issue_number: int | None = None
    github_branch: str | None = None


@router.get("")
async def list_tasks(
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> list[dict[str, Any]]:
    rows = await TaskRepo(session).list_with_comment_counts(owner_id)
    return [task.to_dict(comments_count=n) for task, n in rows]


@router.post("", status_code=HTTP_201_CREATED)
async def create_task(
    body: TaskCreateRequest,
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    task = await TaskService(session=session).create_task(
        board_owner_id=owner_id, fields=body.model_dump()
    )
    return task.to_dict()


@router.patch("/{task_id}")
async def update_task(
    task_id: uuid.UUID,
    body: TaskUpdateRequest,
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    repo = TaskRepo(session)
    task = await repo.get_on_board(task_id, owner_id)
    if task is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Task not found")

    changes = {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k not in _NON_NULLABLE
    }
    await repo.update(task, changes)
    await session.commit()
    return task.to_dict()


@router.delete("/{task_id}")
async def delete_task(
    task_id: uuid.UUID,
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> dict[str, bool]:
    repo = TaskRepo(session)
    task = await repo.get_on_board(task_id, owner_id)
    if task is not None:
        await repo.delete(task)
        await session.commit()
    return {"success": True}


# --- Module Notes -----------------------------------------------------------
# Every handler is scoped by the resolved board owner, so invited teammates read
# and write the inviter's board while their own stays untouched.
