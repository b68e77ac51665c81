from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from backoffice.core.time import utcnow


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    BLOCKED = "BLOCKED"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TimelineEventType(str, Enum):
    DISCOVERY = "DISCOVERY"
    PLANNING = "PLANNING"
    DEVELOPMENT = "DEVELOPMENT"
    QA = "QA"
    DEPLOYMENT = "DEPLOYMENT"
    SUPPORT = "SUPPORT"


class Task(SQLModel, table=True):
    __tablename__ = "project_tasks"

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: str
    description: str | None = None
    status: TaskStatus = Field(default=TaskStatus.TODO, index=True)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    assignee_id: int | None = Field(default=None, foreign_key="accounts.id", index=True)
    due_date: date | None = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TimelineEvent(SQLModel, table=True):
    __tablename__ = "project_timeline_events"

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    actor_id: int | None = Field(default=None, foreign_key="accounts.id")
    event_type: TimelineEventType
    title: str
    description: str | None = None
    occurred_at: datetime = Field(default_factory=utcnow, index=True)
