from contextlib import contextmanager
from typing import Optional

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from harmony.core.config import get_settings

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.
    Pool sizing only applies to server databases; SQLite uses its default pool.
    """
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})

    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=echo
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL must be set to use the database storage backend")
        _engine = build_engine(settings.database_url, echo=settings.debug)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory (singleton pattern)"""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False,
                                        expire_on_commit=False, bind=get_engine())
    return _session_factory


@contextmanager
def get_db_session(factory: Optional[sessionmaker] = None):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(select(UserTable))
    """
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_database_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning(f"Database connection failed: {e}")
        return False
