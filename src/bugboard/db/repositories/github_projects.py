"""
bugboard.db.repositories.github_projects

Repository for saved `GithubProject` mappings.
"""

from __future__ import annotations

import uuid

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from bugboard.db.models import GithubProject


class GithubProjectRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, user_id: str, owner: str, repo: str, display_name: str | None
    ) -> GithubProject:
        project = GithubProject(user_id=user_id, owner=owner, repo=repo, display_name=display_name)
        self._session.add(project)
        await self._session.flush()
        return project

    async def list_for_user(self, user_id: str) -> list[GithubProject]:
        stmt = (
            select(GithubProject)
            .where(GithubProject.user_id == user_id)
            .order_by(desc(GithubProject.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete_owned(self, project_id: uuid.UUID, user_id: str) -> None:
        # Deleting a missing or foreign row is a no-op, same as the managed backend.
        stmt = delete(GithubProject).where(
            GithubProject.id == project_id, GithubProject.user_id == user_id
        )
        await self._session.execute(stmt)
