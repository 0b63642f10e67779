"""
bugboard.services.tasks

Task lifecycle service (transaction owner for task writes).

Responsibilities:
- Create tasks on a board owner's board with the next task key.
- Promote a report into a backlog task and link the two.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import Report, ReportStatus, Task, TaskStatus
from bugboard.db.repositories.reports import ReportRepo
from bugboard.db.repositories.task_counters import TaskCounterRepo
from bugboard.db.repositories.tasks import TaskRepo
from bugboard.observability.logging import get_logger

log = get_logger(__name__)


class ReportAlreadyPromoted(Exception):
    pass


class TaskService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._tasks = TaskRepo(session)
        self._counters = TaskCounterRepo(session)
        self._reports = ReportRepo(session)

    async def create_task(self, *, board_owner_id: str, fields: dict[str, Any]) -> Task:
        task_key = await self._counters.next_task_key(board_owner_id)
        task = await self._tasks.create(board_owner_id=board_owner_id, task_key=task_key, **fields)
        await self._session.commit()
        log.info("task_created", task_id=str(task.id), task_key=task_key, board_owner=board_owner_id)
        return task

    async def promote_report(self, *, report: Report, board_owner_id: str) -> Task:
        if report.status == ReportStatus.promoted:
            raise ReportAlreadyPromoted(str(report.id))

        task_key = await self._counters.next_task_key(board_owner_id)
        task = await self._tasks.create(
            board_owner_id=board_owner_id,
            task_key=task_key,
            title=report.title,
            description=report.description,
            type=report.type,
            priority=report.priority,
            status=TaskStatus.backlog,
            labels=[],
            assignee="",
            report_id=report.id,
        )
        await self._reports.update(
            report, {"status": ReportStatus.promoted, "promoted_task_id": task.id}
        )
        # Task insert and report link commit together.
        await self._session.commit()
        log.info("report_promoted", report_id=str(report.id), task_id=str(task.id))
        return task

    async def find_owned_report(self, report_id: uuid.UUID, user_id: str) -> Report | None:
        return await self._reports.get_owned(report_id, user_id, for_update=True)


# --- Module Notes -----------------------------------------------------------
# Counter allocation happens inside the same transaction as the task insert, so a
# failed insert rolls the counter back too.
