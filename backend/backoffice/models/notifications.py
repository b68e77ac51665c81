from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from backoffice.core.time import utcnow


class NotificationType(str, Enum):
    PROJECT_ASSIGNMENT = "PROJECT_ASSIGNMENT"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_UPDATED = "TASK_UPDATED"
    INQUIRY_SUBMITTED = "INQUIRY_SUBMITTED"
    PROJECT_NOTE = "PROJECT_NOTE"
    PROJECT_COMPLETED = "PROJECT_COMPLETED"


class Notification(SQLModel, table=True):
    __tablename__ = "user_notifications"

    id: int | None = Field(default=None, primary_key=True)
    recipient_id: int = Field(foreign_key="accounts.id", index=True)
    type: NotificationType
    title: str
    message: str | None = None
    project_id: int | None = Field(default=None, foreign_key="projects.id")
    task_id: int | None = Field(default=None, foreign_key="project_tasks.id")

    # Only ever flipped False -> True.
    read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
