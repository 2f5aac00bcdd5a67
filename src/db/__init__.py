"""Database module."""

from src.db.database import (
    async_session_maker,
    engine,
    get_memory_storage,
    get_storage,
    init_db,
)
from src.db.storage import MemoryStorage, SqlStorage, Storage

__all__ = [
    "MemoryStorage",
    "SqlStorage",
    "Storage",
    "async_session_maker",
    "engine",
    "get_memory_storage",
    "get_storage",
    "init_db",
]
