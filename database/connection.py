"""
Database connection and session management.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
import config.settings as settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool options for the configured backend."""
    if url.startswith('sqlite'):
        # Single shared connection so in-memory databases survive across sessions
        return {
            'poolclass': StaticPool,
            'connect_args': {'check_same_thread': False},
        }
    return {
        'poolclass': QueuePool,
        'pool_size': 10,
        'max_overflow': 20,
        'pool_pre_ping': True,
    }


# Create database engine
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,  # Set to True for SQL logging in development
    **_engine_options(settings.DATABASE_URL)
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.

    Provides automatic session management with proper cleanup and error handling.

    Usage:
        with get_db_session() as session:
            # Use session here
            pass
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        session.close()


def get_session() -> Session:
    """
    Get a new database session.

    Note: Remember to close the session when done.
    Consider using get_db_session() context manager instead.
    """
    return SessionLocal()


def init_database():
    """
    Initialize database tables.

    This should be called during application startup.
    """
    from database import Base
    import models  # noqa: F401  registers every table on Base.metadata

    try:
        with engine.connect():
            logger.info("Database connection established")

        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables initialized successfully")

    except Exception as e:
        logger.warning(f"Database initialization encountered an issue: {e}")
        logger.info("Continuing with existing database schema")


def drop_database():
    """Drop every table. Used by the test suite."""
    from database import Base
    Base.metadata.drop_all(bind=engine)


def health_check() -> bool:
    """
    Check database connectivity.

    Returns:
        True if database is accessible, False otherwise
    """
    try:
        with get_db_session() as session:
            session.execute(text('SELECT 1'))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
