"""
Database initialization.

Connectivity check used at startup, and table creation for local setups
that do not run the Alembic migrations.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, text

logger = logging.getLogger(__name__)


def check_connection(engine: Engine) -> None:
    """
    Verify the database is reachable.

    Raises:
        SQLAlchemyError: If the round-trip fails (logged first)
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        url = engine.url
        logger.error("Database connection failed (host=%s, database=%s, port=%s): %s",
                     url.host, url.database, url.port, exc)
        raise
    logger.info("Connected to database %s on %s", engine.url.database, engine.url.host)


def init_db(engine: Engine) -> None:
    """Create all tables registered on SQLModel.metadata."""
    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created")
