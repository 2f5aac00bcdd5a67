"""Redis caching for YouTube API responses.

Provides async Redis caching with JSON serialization, TTL management and
cache key namespacing. Every operation degrades to a miss when Redis is
unreachable, so the app keeps working without it.
"""

import hashlib
import json
from datetime import timedelta
from typing import Any

import redis.asyncio as redis

from src.config import get_settings
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

CACHE_TTL_DEFAULT = timedelta(hours=6)


class RedisCache:
    """Async Redis cache client with JSON serialization."""

    def __init__(self) -> None:
        self._client: redis.Redis | None = None
        self._connected = False

    async def _get_client(self) -> redis.Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(
                str(settings.redis_url),
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> bool:
        """Test Redis connection."""
        try:
            client = await self._get_client()
            await client.ping()
            self._connected = True
            return True
        except Exception as e:
            logger.warning(f"Redis cache unavailable: {e}")
            self._connected = False
            return False

    async def ping(self) -> bool:
        """Ping Redis to check connection health."""
        if not self._connected:
            return False
        try:
            client = await self._get_client()
            return bool(await client.ping())
        except Exception as e:
            logger.debug(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._connected = False

    async def get(self, key: str) -> Any | None:
        """Get value from cache.

        Returns:
            Cached value or None if not found/expired/unavailable
        """
        if not self._connected:
            return None

        try:
            client = await self._get_client()
            data = await client.get(key)
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.debug(f"Cache get error for {key}: {e}")
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
    ) -> bool:
        """Set value in cache.

        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl: Time to live (default: 6 hours)

        Returns:
            True if successful
        """
        if not self._connected:
            return False

        try:
            client = await self._get_client()
            serialized = json.dumps(value, default=str)
            expire_seconds = int((ttl or CACHE_TTL_DEFAULT).total_seconds())
            await client.setex(key, expire_seconds, serialized)
            return True
        except Exception as e:
            logger.debug(f"Cache set error for {key}: {e}")
            return False


# Global cache instance
cache = RedisCache()


def make_cache_key(namespace: str, *args: Any) -> str:
    """Build a cache key such as "youtube:search:video:lofi beats".

    Keys longer than 200 characters are shortened to a hash suffix.
    """
    parts = [namespace]
    parts.extend(str(arg) for arg in args if arg is not None)
    key_str = ":".join(parts)

    if len(key_str) > 200:
        hash_suffix = hashlib.md5(key_str.encode()).hexdigest()[:12]
        key_str = f"{namespace}:{hash_suffix}"

    return key_str
