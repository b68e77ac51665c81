from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from backoffice.core.time import utcnow


class InquiryStatus(str, Enum):
    NEW = "NEW"
    IN_DISCUSSION = "IN_DISCUSSION"
    QUOTED = "QUOTED"
    WON = "WON"
    LOST = "LOST"
    CLOSED = "CLOSED"


class Inquiry(SQLModel, table=True):
    __tablename__ = "inquiries"

    id: int | None = Field(default=None, primary_key=True)
    full_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    message: str
    status: InquiryStatus = Field(default=InquiryStatus.NEW)
    assigned_to: str | None = None
    source: str | None = None
    project_id: int | None = Field(default=None, foreign_key="projects.id", index=True)

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)
