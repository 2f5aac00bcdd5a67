"""Storage backends."""

from src.db.storage.base import Storage
from src.db.storage.memory import MemoryStorage
from src.db.storage.sql import SqlStorage

__all__ = [
    "MemoryStorage",
    "SqlStorage",
    "Storage",
]
