"""
bugboard.db.models

Persistence schema for the task board.

Responsibilities:
- Define ORM models:
  - Profile: per-user identity fields, encrypted GitHub token, team invite list
  - Task: a card on a board owner's Kanban board
  - Comment: append-only discussion on a task
  - Report: intake record that can be promoted into a task
  - GithubProject: saved owner/repo mapping used to prefill issue forms
  - TaskCounter: per-board-owner sequence behind task keys
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bugboard.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class TaskStatus(enum.StrEnum):
    # Kanban columns, left to right.
    backlog = "backlog"
    todo = "todo"
    in_progress = "in_progress"
    in_review = "in_review"
    done = "done"


class TaskPriority(enum.StrEnum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"


class TaskType(enum.StrEnum):
    bug = "bug"
    feature = "feature"
    improvement = "improvement"
    task = "task"


class ReportStatus(enum.StrEnum):
    open = "open"
    reviewing = "reviewing"
    promoted = "promoted"
    dismissed = "dismissed"


class Profile(Base):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")

    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    company: Mapped[str | None] = mapped_column(String(256), nullable=True)
    company_logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    disclaimer_accepted: Mapped[bool] = mapped_column(nullable=False, default=False)
    popia_accepted: Mapped[bool] = mapped_column(nullable=False, default=False)

    # Lowercase, deduplicated, order-preserving (see services.board_owner).
    invite_emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    github_token_enc: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime | None] = mapped_column(nullable=True, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    def to_public(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company": self.company,
            "company_logo_url": self.company_logo_url,
            "invite_emails": list(self.invite_emails or []),
            "contact_number": self.contact_number,
            "disclaimer_accepted": self.disclaimer_accepted,
            "popia_accepted": self.popia_accepted,
            "has_github_token": bool(self.github_token_enc),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat(),
        }


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[TaskType] = mapped_column(Enum(TaskType), nullable=False)
    priority: Mapped[TaskPriority] = mapped_column(Enum(TaskPriority), nullable=False)
    reporter_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    reporter_email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus), nullable=False, default=ReportStatus.open, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    promoted_task_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "priority": self.priority.value,
            "reporter_name": self.reporter_name,
            "reporter_email": self.reporter_email,
            "status": self.status.value,
            "user_id": self.user_id,
            "promoted_task_id": str(self.promoted_task_id) if self.promoted_task_id else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    task_key: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus), nullable=False, default=TaskStatus.backlog
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority), nullable=False, default=TaskPriority.medium
    )
    type: Mapped[TaskType] = mapped_column(Enum(TaskType), nullable=False, default=TaskType.task)
    labels: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    assignee: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    # Board owner, not necessarily the caller who created the task.
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    report_id: Mapped[uuid.UUID | None] = mapped_column(SAUuid(as_uuid=True), nullable=True)

    github_repo: Mapped[str | None] = mapped_column(String(256), nullable=True)
    github_issue_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    github_issue_number: Mapped[int | None] = mapped_column(nullable=True)
    github_branch: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    comments: Mapped[list[Comment]] = relationship(
        back_populates="task", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_tasks_user_created", "user_id", "created_at"),)

    def to_dict(self, *, comments_count: int | None = None) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": str(self.id),
            "task_key": self.task_key,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "type": self.type.value,
            "labels": list(self.labels or []),
            "assignee": self.assignee,
            "user_id": self.user_id,
            "report_id": str(self.report_id) if self.report_id else None,
            "github_repo": self.github_repo,
            "github_issue_url": self.github_issue_url,
            "github_issue_number": self.github_issue_number,
            "github_branch": self.github_branch,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
        if comments_count is not None:
            out["comments_count"] = comments_count
        return out


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    task: Mapped[Task] = relationship(back_populates="comments")

    __table_args__ = (Index("ix_comments_task_created", "task_id", "created_at"),)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "task_id": str(self.task_id),
            "user_id": self.user_id,
            "user_email": self.user_email,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class GithubProject(Base):
    __tablename__ = "github_projects"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    owner: Mapped[str] = mapped_column(String(256), nullable=False)
    repo: Mapped[str] = mapped_column(String(256), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "owner": self.owner,
            "repo": self.repo,
            "display_name": self.display_name,
            "created_at": self.created_at.isoformat(),
        }


class TaskCounter(Base):
    __tablename__ = "task_counters"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    counter: Mapped[int] = mapped_column(nullable=False, default=0)


# --- Module Notes -----------------------------------------------------------
# Enum columns store member names; names equal values here so the stored strings
# match the API contract.
