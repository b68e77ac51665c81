from __future__ import annotations

from datetime import date, datetime

from sqlmodel import Field, SQLModel

from backoffice.models.work import TaskPriority, TaskStatus, TimelineEventType
from backoffice.schemas.accounts import StaffSummary


class TaskCreate(SQLModel):
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: int | None = None
    due_date: date | None = None


class TaskUpdate(SQLModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: int | None = None
    due_date: date | None = None
    clear_assignee: bool = False
    clear_due_date: bool = False


class TaskRead(SQLModel):
    id: int
    project_id: int
    project_name: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    assignee: StaffSummary | None = None
    updated_at: datetime | None = None


class TaskBoard(SQLModel):
    todo: list[TaskRead] = Field(default_factory=list)
    in_progress: list[TaskRead] = Field(default_factory=list)
    review: list[TaskRead] = Field(default_factory=list)
    blocked: list[TaskRead] = Field(default_factory=list)
    done: list[TaskRead] = Field(default_factory=list)


class TimelineEventCreate(SQLModel):
    event_type: TimelineEventType
    title: str
    description: str | None = None


class TimelineEventRead(SQLModel):
    id: int
    project_id: int
    event_type: TimelineEventType
    title: str
    description: str | None = None
    occurred_at: datetime
    actor: StaffSummary | None = None
