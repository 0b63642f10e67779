"""
bugboard.api.routers.github_projects

Saved GitHub project mappings (owner/repo) used to prefill issue forms.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST

from bugboard.api.deps import db_session
from bugboard.auth.deps import get_identity
from bugboard.auth.models import Identity
from bugboard.db.repositories.github_projects import GithubProjectRepo

router = APIRouter(prefix="/api/github/projects", tags=["github"])


class GithubProjectCreateRequest(BaseModel):
    owner: str | None = None
    repo: str | None = None
    display_name: str | None = None


class GithubProjectDeleteRequest(BaseModel):
    id: str | None = None


@router.get("")
async def list_projects(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, list[dict[str, Any]]]:
    projects = await GithubProjectRepo(session).list_for_user(identity.user_id)
    return {"projects": [p.to_dict() for p in projects]}


@router.post("", status_code=HTTP_201_CREATED)
async def create_project(
    body: GithubProjectCreateRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, dict[str, Any]]:
    owner = (body.owner or "").strip()
    repo = (body.repo or "").strip()
    if not owner or not repo:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="owner and repo are required")

    project = await GithubProjectRepo(session).create(
        user_id=identity.user_id,
        owner=owner,
        repo=repo,
        display_name=(body.display_name or "").strip() or None,
    )
    await session.commit()
    return {"project": project.to_dict()}


@router.delete("")
async def delete_project(
    body: GithubProjectDeleteRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(db_session),
) -> dict[str, bool]:
    try:
        project_id = uuid.UUID(body.id or "")
    except ValueError as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="id is required") from e

    await GithubProjectRepo(session).delete_owned(project_id, identity.user_id)
    await session.commit()
    return {"success": True}
