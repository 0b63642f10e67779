"""
bugboard.api.routers.reports

Report intake and triage endpoints.

Responsibilities:
- Submit, list, edit and delete the caller's reports.
- Promote a report into a backlog task on the caller's resolved board.
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
from bugboard.db.models import ReportStatus, TaskPriority, TaskType
from bugboard.db.repositories.reports import ReportRepo
from bugboard.services.tasks import ReportAlreadyPromoted, TaskService

router = APIRouter(prefix="/api/reports", tags=["reports"])


class ReportCreateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    type: TaskType | None = None
    priority: TaskPriority | None = None
    reporter_name: str | None = None


class ReportUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    type: TaskType | None = None
    priority: TaskPriority | None = None
    reporter_name: str | None = None
    status: ReportStatus | None = None


def default_reporter_name(email: str) -> str:
    local = email.split("@")[0] if email else ""
    return local or "Anonymous"


@router.get("")
async def list_reports(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> list[dict[str, Any]]:
    # Promoted reports live on the board now; the intake queue hides them.
    return [r.to_dict() for r in await ReportRepo(session).list_active(identity.user_id)]


@router.post("", status_code=HTTP_201_CREATED)
async def create_report(
    body: ReportCreateRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    if not body.title or body.type is None or body.priority is None:
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail="Title, type, and priority are required"
        )
    report = await ReportRepo(session).create(
        user_id=identity.user_id,
        title=body.title,
        description=body.description or "",
        type=body.type,
        priority=body.priority,
        reporter_name=body.reporter_name or default_reporter_name(identity.email),
        reporter_email=identity.email,
    )
    await session.commit()
    return report.to_dict()


@router.patch("/{report_id}")
async def update_report(
    report_id: uuid.UUID,
    body: ReportUpdateRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    if body.status == ReportStatus.promoted:
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail="Use the promote endpoint to promote a report"
        )
    repo = ReportRepo(session)
    report = await repo.get_owned(report_id, identity.user_id)
    if report is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Report not found")

    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    await repo.update(report, changes)
    await session.commit()
    return report.to_dict()


@router.delete("/{report_id}")
async def delete_report(
    report_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, bool]:
    repo = ReportRepo(session)
    report = await repo.get_owned(report_id, identity.user_id)
    if report is not None:
        await repo.delete(report)
        await session.commit()
    return {"success": True}


@router.post("/{report_id}/promote", status_code=HTTP_201_CREATED)
async def promote_report(
    report_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    owner_id: str = Depends(board_owner_id),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    svc = TaskService(session=session)
    report = await svc.find_owned_report(report_id, identity.user_id)
    if report is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Report not found")
    try:
        task = await svc.promote_report(report=report, board_owner_id=owner_id)
    except ReportAlreadyPromoted as e:
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail="Report already promoted"
        ) from e
    return {"task": task.to_dict(), "report_id": str(report_id)}


# --- Module Notes -----------------------------------------------------------
# Reports are owned by the submitting user; only the promoted task lands on the
# (possibly shared) board.
