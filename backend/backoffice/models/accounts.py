from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel

from backoffice.core.roles import Role
from backoffice.core.time import utcnow


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: int | None = Field(default=None, primary_key=True)
    full_name: str
    # Always stored lower-case; lookups are lower-cased too.
    email: str = Field(index=True, unique=True)
    role: Role = Field(index=True)
    active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
