from __future__ import annotations

from datetime import date, datetime

from sqlmodel import Field, SQLModel

from backoffice.core.roles import Role
from backoffice.models.projects import ProjectStatus


class ProjectCreate(SQLModel):
    name: str
    summary: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    progress_percentage: int = Field(default=0, ge=0, le=100)
    start_date: date | None = None
    target_date: date | None = None
    highlighted: bool = False
    client_id: int | None = None


class ProjectUpdate(SQLModel):
    name: str | None = None
    summary: str | None = None
    status: ProjectStatus | None = None
    progress_percentage: int | None = Field(default=None, ge=0, le=100)
    target_date: date | None = None
    highlighted: bool | None = None
    client_id: int | None = None


class ProjectRead(SQLModel):
    id: int
    name: str
    summary: str
    status: ProjectStatus
    progress_percentage: int
    start_date: date | None = None
    target_date: date | None = None
    highlighted: bool
    client_id: int | None = None
    updated_at: datetime


class AssignmentCreate(SQLModel):
    project_id: int
    member_id: int
    assignment_role: Role


class AssignmentRead(SQLModel):
    id: int
    project_id: int
    member_id: int
    assignment_role: Role
    created_at: datetime
