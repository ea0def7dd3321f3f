"""Database configuration and session management."""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from agenthub.config import settings
from agenthub.errors import StorageFailure

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# Create engine lazily to allow testing without database
_engine = None
_SessionLocal = None


def get_engine():
    """Get or create database engine."""
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError("DATABASE_URL not configured")
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,  # Test connections before use
            pool_recycle=300,  # Recycle connections after 5 minutes
        )
    return _engine


def get_session_factory():
    """Get or create session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Commit everything done inside the block as one unit, or nothing.

    Integrity errors are re-raised untouched so callers can translate
    constraint violations; any other storage error becomes StorageFailure.
    """
    try:
        yield db
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage error, transaction rolled back: {e}")
        raise StorageFailure() from e
    except Exception:
        db.rollback()
        raise


def init_db():
    """Initialize database tables."""
    from agenthub.db import tables  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
