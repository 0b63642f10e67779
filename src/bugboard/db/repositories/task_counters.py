"""
bugboard.db.repositories.task_counters

Repository for per-board-owner task key sequences.

Responsibilities:
- Allocate the next counter value for a board owner in one atomic statement.
- Format task keys (`BUG-<n>`).
"""

from __future__ import annotations

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import TaskCounter

TASK_KEY_PREFIX = "BUG"


def format_task_key(counter: int) -> str:
    return f"{TASK_KEY_PREFIX}-{counter}"


class TaskCounterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _insert(self):
        dialect = self._session.bind.dialect.name if self._session.bind is not None else ""
        if dialect == "postgresql":
            return postgresql.insert(TaskCounter)
        if dialect == "sqlite":
            return sqlite.insert(TaskCounter)
        raise NotImplementedError(f"atomic counter upsert not supported on {dialect!r}")

    async def next_value(self, user_id: str) -> int:
        # Single INSERT .. ON CONFLICT DO UPDATE .. RETURNING: no read-modify-write race.
        stmt = self._insert().values(user_id=user_id, counter=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[TaskCounter.user_id],
            set_={"counter": TaskCounter.counter + 1},
        ).returning(TaskCounter.counter)
        return int((await self._session.execute(stmt)).scalar_one())

    async def next_task_key(self, user_id: str) -> str:
        return format_task_key(await self.next_value(user_id))
