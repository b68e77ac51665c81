from __future__ import annotations

from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel

from backoffice.core.errors import InvalidOperation

ModelT = TypeVar("ModelT", bound=SQLModel)


def commit_or_conflict(session: Session, *, detail: str, reason: str) -> None:
    """Commit the unit of work once; a constraint violation rolls everything back."""
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise InvalidOperation(detail, reason=reason) from exc


def save(session: Session, obj: ModelT, *, detail: str = "Write violates constraints", reason: str = "storage.conflict") -> ModelT:
    session.add(obj)
    commit_or_conflict(session, detail=detail, reason=reason)
    session.refresh(obj)
    return obj


def delete(session: Session, obj: SQLModel, *, detail: str = "Record is still referenced", reason: str = "storage.referenced") -> None:
    session.delete(obj)
    commit_or_conflict(session, detail=detail, reason=reason)
