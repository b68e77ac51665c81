from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel

from backoffice.models.inquiries import InquiryStatus


class InquiryCreate(SQLModel):
    full_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    message: str
    source: str | None = None
    project_id: int | None = None


class InquiryRead(SQLModel):
    id: int
    full_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    message: str
    status: InquiryStatus
    assigned_to: str | None = None
    source: str | None = None
    project_id: int | None = None
    created_at: datetime


class InquiryUpdate(SQLModel):
    status: InquiryStatus
    assigned_to: str | None = Field(default=None, max_length=160)
