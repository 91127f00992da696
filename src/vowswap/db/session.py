"""Engine, session factory and request-scoped sessions for the VowSwap store."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from vowswap.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import vowswap.models  # noqa: E402,F401


def enforce_sqlite_foreign_keys(target: Engine) -> Engine:
    """Turn on SQLite's foreign key checks for every connection of ``target``."""
    if target.dialect.name != "sqlite":
        return target

    @event.listens_for(target, "connect")
    def _foreign_keys_on(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    return target


def _connect_args(url: str) -> dict[str, Any]:
    # Request handlers and the threadpool share pooled SQLite connections.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = enforce_sqlite_foreign_keys(
    create_engine(
        settings.effective_database_url,
        pool_pre_ping=True,
        echo=settings.sql_debug,
        connect_args=_connect_args(settings.effective_database_url),
    )
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection.

    Anything left uncommitted when the request ends is rolled back by close().
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
