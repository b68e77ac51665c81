from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from backoffice import models  # noqa: F401  (registers tables on SQLModel.metadata)
from backoffice.core.config import settings
from backoffice.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            # One shared connection, otherwise every checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(database_url, **kwargs)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(settings.database_url)


def init_db(bind: Engine | None = None) -> None:
    target = bind or engine
    SQLModel.metadata.create_all(target)
    logger.info("db.init tables=%s", len(SQLModel.metadata.tables))


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
