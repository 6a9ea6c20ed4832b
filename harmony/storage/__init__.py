"""
Storage module - IStorage and its in-memory and SQL implementations.

Routes receive the active store through the get_storage dependency:

    @router.get("/posts")
    async def list_posts(storage: IStorage = Depends(get_storage)):
        ...
"""
from functools import lru_cache

from loguru import logger

from harmony.core.config import get_settings
from harmony.storage.base import IStorage
from harmony.storage.memory import MemStorage


@lru_cache()
def get_storage() -> IStorage:
    """Build the configured storage backend once per process"""
    backend = get_settings().resolved_storage_backend

    if backend == "database":
        from harmony.db.postgres import get_engine, get_session_factory
        from harmony.db.tables import create_tables
        from harmony.storage.database import DatabaseStorage

        create_tables(get_engine())
        logger.info("Using database storage")
        return DatabaseStorage(get_session_factory())

    if backend != "memory":
        raise ValueError(f"Unknown storage backend: {backend}")

    logger.info("Using in-memory storage")
    return MemStorage()


__all__ = ["IStorage", "MemStorage", "get_storage"]
