from functools import lru_cache
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from hirehub.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_engine() -> Engine:
    """
    Create engine with connection pool (built on first use).
    pool_size=5: maintain 5 connections ready
    max_overflow=10: allow 10 extra connections under load
    """
    settings = get_settings()
    return create_engine(
        settings.postgres_url,
        pool_size=5,
        max_overflow=10,
        echo=settings.debug  # Log SQL queries in debug mode
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Session factory bound to the application engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextmanager
def get_db_session(session_factory: sessionmaker = None):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM accounts"))
    """
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if PostgreSQL is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("PostgreSQL connection failed: %s", e)
        return False
