from __future__ import annotations

import pytest
from fastapi import FastAPI

from bugboard.db.repositories.task_counters import TaskCounterRepo, format_task_key


def test_format_task_key() -> None:
    assert format_task_key(1) == "BUG-1"
    assert format_task_key(42) == "BUG-42"


@pytest.mark.asyncio
async def test_counter_starts_at_one_and_increments(app: FastAPI) -> None:
    async with app.state.sessionmaker() as session:
        repo = TaskCounterRepo(session)
        assert [await repo.next_value("owner-a") for _ in range(3)] == [1, 2, 3]
        await session.commit()

    async with app.state.sessionmaker() as session:
        repo = TaskCounterRepo(session)
        assert await repo.next_task_key("owner-a") == "BUG-4"


@pytest.mark.asyncio
async def test_counters_are_per_owner(app: FastAPI) -> None:
    async with app.state.sessionmaker() as session:
        repo = TaskCounterRepo(session)
        assert await repo.next_value("owner-a") == 1
        assert await repo.next_value("owner-b") == 1
        assert await repo.next_value("owner-a") == 2
        await session.commit()


@pytest.mark.asyncio
async def test_rolled_back_allocation_is_released(app: FastAPI) -> None:
    async with app.state.sessionmaker() as session:
        repo = TaskCounterRepo(session)
        assert await repo.next_value("owner-a") == 1
        await session.rollback()

    async with app.state.sessionmaker() as session:
        assert await TaskCounterRepo(session).next_value("owner-a") == 1
