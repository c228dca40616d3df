"""Database session configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from neoboard.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import neoboard.models  # noqa: E402,F401


def _connect_args(url: str) -> dict[str, object]:
    # Request handlers and the session dependency may run on different threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args=_connect_args(settings.effective_database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Commit everything written inside the block as one transaction.

    On any error the session is rolled back and the error re-raised, so an
    operation that touches several rows (entity, counters, cascades) is
    either fully applied or not at all.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def init_database() -> None:
    """Verify connectivity and create missing tables.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached.
            Startup is aborted rather than serving without a database.
    """
    target = make_url(settings.effective_database_url).render_as_string(hide_password=True)
    logger.info("Connecting to database %s", target)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        create_tables()
    except Exception:
        logger.exception("Database initialization failed for %s", target)
        raise
    logger.info("Database ready (%s)", engine.dialect.name)
