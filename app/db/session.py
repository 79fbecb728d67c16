"""
Database session management.

Provides the SQLModel engine, the session factory injected into the API
layer, and the transaction scope used by mutating operations.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, Iterator

from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, create_engine

from app.core.config import settings

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def create_db_engine(url: str) -> Engine:
    """Create a pooled engine; SQLite URLs get thread-shareable connections instead of pool sizing."""
    if url.startswith("sqlite"):
        return create_engine(url, echo=settings.DEBUG, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        echo=settings.DEBUG,                        # Log SQL queries in debug mode
        pool_pre_ping=True,                         # Verify connections before using
        pool_size=settings.DATABASE_POOL_SIZE,      # Connection pool size
        max_overflow=settings.DATABASE_MAX_OVERFLOW  # Max connections beyond pool_size
    )


def create_session_factory(bind: Engine) -> SessionFactory:
    return sessionmaker(bind=bind, class_=Session, expire_on_commit=False)


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = create_session_factory(engine)


def get_session_factory() -> SessionFactory:
    """Dependency returning the session factory (overridden in tests)."""
    return SessionLocal


def get_db(session_factory: SessionFactory = Depends(get_session_factory)) -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    The session (and its pooled connection) is released when the request
    finishes, whatever the outcome.

    Yields:
        SQLModel Session instance
    """
    with session_factory() as session:
        yield session


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    Run the enclosed block as one unit of work.

    Commits when the block completes, rolls back and re-raises on any
    exception (including business-rule errors raised inside the block).
    """
    try:
        yield session
        session.commit()
    except Exception:
        logger.debug("Rolling back transaction", exc_info=True)
        session.rollback()
        raise
