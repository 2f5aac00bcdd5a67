"""Shared persistent httpx client for YouTube Data API calls.

A persistent client reuses pooled connections instead of paying a TCP +
TLS handshake for every page of a channel sync.
"""

import httpx

from src.constants import API_TIMEOUT_EXTERNAL

# Connection pool limits
_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_youtube_client: httpx.AsyncClient | None = None


def get_youtube_http_client() -> httpx.AsyncClient:
    """Get persistent httpx client for YouTube API calls."""
    global _youtube_client
    if _youtube_client is None:
        _youtube_client = httpx.AsyncClient(
            timeout=API_TIMEOUT_EXTERNAL,
            limits=_POOL_LIMITS,
            http2=False,
        )
    return _youtube_client


async def close_all_clients() -> None:
    """Close all persistent httpx clients. Call during app shutdown."""
    global _youtube_client
    if _youtube_client is not None:
        await _youtube_client.aclose()
        _youtube_client = None
