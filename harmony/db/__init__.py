"""
Database module - SQLAlchemy engine, sessions and table definitions.
"""
from harmony.db.postgres import get_db_session, get_session_factory, test_database_connection

__all__ = [
    "get_db_session",
    "get_session_factory",
    "test_database_connection",
]
