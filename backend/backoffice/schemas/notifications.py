from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel

from backoffice.models.notifications import NotificationType


class NotificationRead(SQLModel):
    id: int
    type: NotificationType
    title: str
    message: str | None = None
    read: bool
    created_at: datetime
    project_id: int | None = None
    task_id: int | None = None


class NotificationFeed(SQLModel):
    notifications: list[NotificationRead] = Field(default_factory=list)
    unread_count: int = 0
