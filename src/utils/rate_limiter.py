"""Token-bucket rate limiter for outbound API calls.

The YouTube Data API enforces per-key quotas; a channel sync issues one
request per page, so long syncs are paced through the "youtube" bucket.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from src.constants import YOUTUBE_BURST_SIZE, YOUTUBE_REQUESTS_PER_SECOND

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    requests_per_second: float = 2.0
    burst_size: int = 5


@dataclass
class TokenBucket:
    """Token bucket for rate limiting."""

    capacity: int
    refill_rate: float  # tokens per second
    tokens: float = field(default=0.0)
    last_refill: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        self.tokens = float(self.capacity)

    def _refill(self) -> None:
        """Refill tokens based on elapsed time."""
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    def acquire(self, tokens: int = 1) -> float:
        """Try to acquire tokens.

        Returns:
            Wait time in seconds (0 if tokens acquired immediately)
        """
        self._refill()

        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0

        tokens_needed = tokens - self.tokens
        return tokens_needed / self.refill_rate

    async def acquire_async(self, tokens: int = 1) -> None:
        """Acquire tokens, waiting if necessary."""
        wait_time = self.acquire(tokens)
        if wait_time > 0:
            logger.debug(f"Rate limited, waiting {wait_time:.2f}s")
            await asyncio.sleep(wait_time)
            self._refill()
            self.tokens -= tokens


class RateLimiter:
    """Per-service rate limiter shared by all outbound clients."""

    def __init__(self) -> None:
        self._buckets: dict[str, TokenBucket] = {}
        self._configs: dict[str, RateLimitConfig] = {
            "youtube": RateLimitConfig(
                requests_per_second=YOUTUBE_REQUESTS_PER_SECOND,
                burst_size=YOUTUBE_BURST_SIZE,
            ),
            "default": RateLimitConfig(),
        }
        self._lock = asyncio.Lock()

    def configure(self, service: str, config: RateLimitConfig) -> None:
        """Configure rate limits for a specific service."""
        self._configs[service] = config
        self._buckets.pop(service, None)

    def _get_bucket(self, service: str) -> TokenBucket:
        """Get or create a token bucket for a service."""
        if service not in self._buckets:
            config = self._configs.get(service, self._configs["default"])
            self._buckets[service] = TokenBucket(
                capacity=config.burst_size,
                refill_rate=config.requests_per_second,
            )
        return self._buckets[service]

    async def acquire(self, service: str = "default", tokens: int = 1) -> None:
        """Acquire rate limit tokens for a service, blocking if exhausted."""
        async with self._lock:
            bucket = self._get_bucket(service)
            await bucket.acquire_async(tokens)


# Global rate limiter instance
rate_limiter = RateLimiter()
