from __future__ import annotations

from sqlmodel import Field, SQLModel

from backoffice.schemas.accounts import StaffSummary
from backoffice.schemas.inquiries import InquiryRead
from backoffice.schemas.notifications import NotificationRead
from backoffice.schemas.projects import ProjectRead
from backoffice.schemas.tasks import TaskBoard, TaskRead, TimelineEventRead


class ProjectSummary(SQLModel):
    project: ProjectRead
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    blocked_tasks: int
    todo_tasks: int
    upcoming_tasks: list[TaskRead] = Field(default_factory=list)
    computed_progress: int
    contributors: list[StaffSummary] = Field(default_factory=list)


class DeveloperWorkspace(SQLModel):
    task_board: TaskBoard
    recent_events: list[TimelineEventRead] = Field(default_factory=list)
    assigned_projects: list[ProjectRead] = Field(default_factory=list)
    project_summaries: list[ProjectSummary] = Field(default_factory=list)
    recent_inquiries: list[InquiryRead] = Field(default_factory=list)
    notifications: list[NotificationRead] = Field(default_factory=list)
    unread_notifications: int = 0
