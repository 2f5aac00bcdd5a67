"""Database connection, session management and storage selection."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import get_settings
from src.db.storage import MemoryStorage, SqlStorage, Storage

settings = get_settings()

engine = create_async_engine(
    settings.database_url_async,
    echo=False,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
    pool_timeout=30,
    pool_recycle=1800,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

_memory_storage: MemoryStorage | None = None


async def init_db() -> None:
    """Initialize database (create tables if needed)."""
    from src.models.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def get_memory_storage() -> MemoryStorage:
    """Process-wide in-memory store used when STORAGE_BACKEND=memory."""
    global _memory_storage
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
    return _memory_storage


async def get_storage() -> AsyncGenerator[Storage, None]:
    """Dependency providing the configured storage backend.

    The SQL backend gets a fresh session per request; writes are committed
    by Storage.transaction() inside the services.
    """
    if settings.uses_memory_storage:
        yield get_memory_storage()
        return

    async with async_session_maker() as session:
        yield SqlStorage(session)
