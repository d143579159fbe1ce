"""Database configuration and session management for the smoke tracker."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from smoke_tracker import settings

# ---------------------------------------------------------------------------
# Constants & Helpers
# ---------------------------------------------------------------------------
DB_PATH = Path(settings.DB_FILENAME).expanduser().absolute()

SQLALCHEMY_DATABASE_URL = f"sqlite:///{DB_PATH}"

# SQLite specific pragmas for better performance / safety
_engine_kwargs = {
    "connect_args": {"check_same_thread": False},  # needed for SQLite + threads
}

engine: Engine | None = None

# Configure Session class; bound in init_db()
SessionLocal = scoped_session(sessionmaker(autoflush=False, expire_on_commit=False))


class Base(DeclarativeBase):
    """Base class for declarative models."""


def init_db(url: str | None = None) -> Engine:
    """Create the engine, bind sessions, create tables and run migrations."""
    global engine

    # models must be registered on Base.metadata before create_all
    from smoke_tracker.dataproviders.repositories import _models  # noqa: F401

    if engine is not None:
        SessionLocal.remove()
        engine.dispose()
    engine = create_engine(url or SQLALCHEMY_DATABASE_URL, echo=False, **_engine_kwargs)
    SessionLocal.configure(bind=engine)
    Base.metadata.create_all(bind=engine)
    run_migrations()
    return engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

# ---------------------------------------------------------------------------
# Simple migration helper (SQLite only)
# ---------------------------------------------------------------------------


def _add_column_if_missing(table: str, column_name: str, column_def: str) -> None:
    """Add column to SQLite table if it doesn't exist."""
    with engine.begin() as conn:
        cols = conn.execute(text(f"PRAGMA table_info({table})")).fetchall()
        if column_name not in [c[1] for c in cols]:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column_name} {column_def}"))


def run_migrations() -> None:
    """Run simple migrations to add new columns if needed."""
    # Free-text fields added after the first release
    _add_column_if_missing("smoking_events", "location", "VARCHAR DEFAULT ''")
    _add_column_if_missing("smoking_events", "notes", "TEXT DEFAULT ''")
    _add_column_if_missing("cravings", "coping_strategy", "TEXT DEFAULT ''")
