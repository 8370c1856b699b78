"""Database setup for DAO the Game using SQLAlchemy 2.0 style.

Provides an engine factory, a Session factory, and Base declarative class.
Only the caller-side persistence layer uses this; the simulation core never
touches the database.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import get_settings


class Base(DeclarativeBase):
    """Base declarative class for all ORM models."""


def get_engine(echo: bool | None = None) -> Engine:
    """Build an engine for the DATABASE_URL currently in the environment."""
    settings = get_settings()
    return create_engine(settings.database_url, echo=echo if echo is not None else settings.echo_sql)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine: Optional[Engine] = None) -> Engine:
    """Create every table registered on Base and return the engine used."""
    import daogame.models  # noqa: F401  (registers tables)

    engine = engine if engine is not None else get_engine()
    Base.metadata.create_all(engine)
    return engine


@contextmanager
def session_scope(engine: Optional[Engine] = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Sessions bind to `engine`, or to a fresh `get_engine()` when omitted,
    so the URL is read when the scope opens rather than at import time.

    Example:
        engine = init_db()
        with session_scope(engine) as session:
            SnapshotStore().save_state(session, state)
    """
    session = make_session_factory(engine if engine is not None else get_engine())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
