"""
Database engine, session factory and store error translation.

This module owns the SQLAlchemy engine built from the configured
DATABASE_URL, the declarative Base shared by all models, and the
``get_sync_db`` dependency used by the routers.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from timetracker.fastapi.core.exceptions import StoreUnavailable
from timetracker.fastapi.core.init_settings import global_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all models."""


def build_engine(url: str, timeout: int = global_settings.DB_POOL_TIMEOUT, **kwargs):
    """
    Create an engine with bounded waits on the store.

    SQLite waits ``timeout`` seconds on a locked database; pooled backends
    wait ``timeout`` seconds for a free connection.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", timeout)
        return create_engine(url, connect_args=connect_args, **kwargs)

    return create_engine(url, pool_timeout=timeout, pool_pre_ping=True, **kwargs)


engine = build_engine(global_settings.DB_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they are registered with Base.metadata
    from timetracker.fastapi.models import Counter, TimeRecord, User  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_sync_db() -> Iterator[Session]:
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(db: Session) -> Iterator[Session]:
    """
    Translate transient store failures into StoreUnavailable.

    The session is rolled back first so the caller's records keep their
    prior state.
    """
    try:
        yield db
    except (OperationalError, PoolTimeoutError) as e:
        db.rollback()
        logger.error("Record store unavailable: %s", e)
        raise StoreUnavailable("Record store is temporarily unavailable, please retry") from e
