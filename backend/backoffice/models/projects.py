from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from backoffice.core.roles import Role
from backoffice.core.time import utcnow


class ProjectStatus(str, Enum):
    PLANNING = "PLANNING"
    DISCOVERY = "DISCOVERY"
    IN_DEVELOPMENT = "IN_DEVELOPMENT"
    TESTING = "TESTING"
    DEPLOYED = "DEPLOYED"
    ON_HOLD = "ON_HOLD"


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    summary: str = ""
    status: ProjectStatus = Field(default=ProjectStatus.PLANNING)
    progress_percentage: int = Field(default=0, ge=0, le=100)
    start_date: date | None = None
    target_date: date | None = None
    highlighted: bool = Field(default=False, index=True)

    # At most one client; projects without one are internal/unassigned.
    client_id: int | None = Field(default=None, foreign_key="accounts.id", index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProjectAssignment(SQLModel, table=True):
    __tablename__ = "project_assignments"
    __table_args__ = (
        UniqueConstraint("project_id", "member_id", name="uq_project_assignments_project_member"),
    )

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    member_id: int = Field(foreign_key="accounts.id", index=True)
    assignment_role: Role = Field(index=True)

    created_at: datetime = Field(default_factory=utcnow)
