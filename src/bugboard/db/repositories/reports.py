"""
bugboard.db.repositories.reports

Repository for `Report` entities.

Responsibilities:
- Create, fetch, update and delete reports owned by a user.
- List the active (not yet promoted) intake queue newest-first.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import Report, ReportStatus, TaskPriority, TaskType


class ReportRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        user_id: str,
        title: str,
        description: str,
        type: TaskType,
        priority: TaskPriority,
        reporter_name: str,
        reporter_email: str,
    ) -> Report:
        report = Report(
            user_id=user_id,
            title=title,
            description=description,
            type=type,
            priority=priority,
            reporter_name=reporter_name,
            reporter_email=reporter_email,
            status=ReportStatus.open,
        )
        self._session.add(report)
        await self._session.flush()
        return report

    async def get_owned(
        self, report_id: uuid.UUID, user_id: str, *, for_update: bool = False
    ) -> Report | None:
        stmt = select(Report).where(Report.id == report_id, Report.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_active(self, user_id: str) -> list[Report]:
        stmt = (
            select(Report)
            .where(Report.user_id == user_id, Report.status != ReportStatus.promoted)
            .order_by(desc(Report.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def update(self, report: Report, changes: dict[str, Any]) -> Report:
        for name, value in changes.items():
            setattr(report, name, value)
        await self._session.flush()
        return report

    async def delete(self, report: Report) -> None:
        await self._session.delete(report)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Promotion (report -> task) is coordinated in `services.tasks`, not here.
