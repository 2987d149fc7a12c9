# backend/stockledger/database.py
"""
Database connection and session management.

Saved portfolio snapshots are the only persisted state. SQLite is the
default backend:
- in-memory (test): StaticPool so every session shares one connection
- file: one connection per thread, check_same_thread disabled for FastAPI
Any other SQLAlchemy URL uses the driver's default pool.
"""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from stockledger.config import settings
from stockledger.models import Base

logger = logging.getLogger(__name__)


def _create_engine():
    """
    Create SQLAlchemy engine with environment-appropriate configuration.

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    url = settings.database_url

    if settings.is_sqlite:
        if ":memory:" in url:
            logger.info("Configuring in-memory SQLite database")
            return create_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=settings.debug,
            )
        logger.info(f"Configuring SQLite database: {url}")
        return create_engine(url, connect_args={"check_same_thread": False}, echo=settings.debug)

    logger.info("Configuring database with default pool")
    return create_engine(url, pool_pre_ping=True, echo=settings.debug)


# Create engine and session factory
engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create all tables defined in models (idempotent)."""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.

    Yields:
        Session: A SQLAlchemy database session that auto-closes after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_health() -> dict:
    """
    Check database connectivity.

    Returns:
        dict: Health status, used by the /health endpoint
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "healthy", "database": engine.dialect.name}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
