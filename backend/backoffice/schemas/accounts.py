from __future__ import annotations

from datetime import datetime

from sqlmodel import SQLModel

from backoffice.core.roles import Role
from backoffice.models.accounts import Account


class StaffSummary(SQLModel):
    id: int
    full_name: str
    email: str
    role: Role

    @classmethod
    def from_account(cls, account: Account) -> "StaffSummary":
        return cls(id=account.id, full_name=account.full_name, email=account.email, role=account.role)


class AccountCreate(SQLModel):
    full_name: str
    email: str
    role: Role


class CustomerRegister(SQLModel):
    full_name: str
    email: str


class StaffCreate(SQLModel):
    full_name: str
    email: str
    role: Role


class AccountUpdate(SQLModel):
    full_name: str | None = None
    email: str | None = None
    role: Role | None = None


class AccountStatusUpdate(SQLModel):
    active: bool


class AccountRead(SQLModel):
    id: int
    full_name: str
    email: str
    role: Role
    active: bool
    created_at: datetime
