from __future__ import annotations

from datetime import date

from sqlmodel import Field, SQLModel

from backoffice.models.projects import ProjectStatus
from backoffice.schemas.accounts import StaffSummary


class ProjectTeamNode(SQLModel):
    id: int
    name: str
    status: ProjectStatus
    progress_percentage: int
    summary: str = ""
    target_date: date | None = None
    customer: StaffSummary | None = None
    sub_admins: list[StaffSummary] = Field(default_factory=list)
    developers: list[StaffSummary] = Field(default_factory=list)
    total_tasks: int = 0
    open_tasks: int = 0
    completed_tasks: int = 0


class CustomerTree(SQLModel):
    customer: StaffSummary
    projects: list[ProjectTeamNode] = Field(default_factory=list)


class SubAdminTree(SQLModel):
    sub_admin: StaffSummary
    projects: list[ProjectTeamNode] = Field(default_factory=list)


class RelationshipGraph(SQLModel):
    customers: list[CustomerTree] = Field(default_factory=list)
    sub_admins: list[SubAdminTree] = Field(default_factory=list)
    unassigned_sub_admins: list[StaffSummary] = Field(default_factory=list)
    unassigned_developers: list[StaffSummary] = Field(default_factory=list)
    unassigned_projects: list[ProjectTeamNode] = Field(default_factory=list)
