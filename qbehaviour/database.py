"""
Database connection and session management for question settings.
Uses SQLAlchemy 2.0 synchronous sessions; behaviours run inside the
host's request, which owns the transaction.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from qbehaviour.config import get_settings
from qbehaviour.kernel.models.base import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, with SQLite pragmas applied on every connection."""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable foreign keys + busy timeout on every new SQLite connection."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

        return engine

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


@lru_cache
def get_engine() -> Engine:
    """Engine built from settings, created on first use."""
    settings = get_settings()
    return build_engine(settings.database_url, echo=settings.debug)


def get_session_maker(engine: Engine | None = None) -> sessionmaker[Session]:
    return sessionmaker(
        engine or get_engine(),
        expire_on_commit=False,
        autoflush=False,
    )


@contextmanager
def session_scope(engine: Engine | None = None) -> Iterator[Session]:
    """Yield a session, committing on success and rolling back on error."""
    session = get_session_maker(engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """Create all tables (used by tests and local setups without migrations)."""
    # Import models so they register with Base.metadata
    from qbehaviour.kernel.models import freetext_field  # noqa: F401

    Base.metadata.create_all(engine or get_engine())
