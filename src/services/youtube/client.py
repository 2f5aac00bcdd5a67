"""YouTube Data API v3 client.

Mirrors the provider contract used by channel ingestion: key-based auth,
maxResults capped at 50, nextPageToken cursors and comma-joined id lookups.
Documentation: https://developers.google.com/youtube/v3/docs
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.constants import (
    YOUTUBE_CHANNEL_PARTS,
    YOUTUBE_PAGE_SIZE,
    YOUTUBE_PLAYLIST_ITEM_PARTS,
    YOUTUBE_PLAYLIST_PARTS,
    YOUTUBE_VIDEO_PARTS,
)
from src.exceptions import UpstreamError
from src.utils.http_client import get_youtube_http_client
from src.utils.metrics import metrics
from src.utils.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of a cursor-paginated list endpoint."""

    items: list[dict[str, Any]] = field(default_factory=list)
    next_page_token: str | None = None


class YouTubeClient:
    """Client for the YouTube Data API.

    Usage:
        client = YouTubeClient(api_key="...")

        channel = await client.get_channel("UC_x5XG1OV2P6uZZ5FSM9Ttw")

        page = await client.list_playlist_items("UU_x5XG1OV2P6uZZ5FSM9Ttw")
        while page.next_page_token:
            page = await client.list_playlist_items(
                "UU_x5XG1OV2P6uZZ5FSM9Ttw", page_token=page.next_page_token
            )
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: YouTube Data API key
            base_url: API root, overridable for tests
            http_client: httpx client to use instead of the shared pooled one
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """Issue a GET against an API endpoint.

        None-valued params are dropped, so an absent page token is not sent.

        Raises:
            UpstreamError: On transport errors, non-200 responses or invalid JSON
        """
        query = {key: value for key, value in params.items() if value is not None}
        query["key"] = self.api_key

        await rate_limiter.acquire("youtube")
        client = self._http_client or get_youtube_http_client()

        start_time = time.monotonic()
        try:
            response = await client.get(f"{self.base_url}/{endpoint}", params=query)
        except httpx.HTTPError as e:
            metrics.youtube_api_requests_total.inc(endpoint=endpoint, status="error")
            raise UpstreamError(f"YouTube {endpoint} request failed: {e}") from e
        finally:
            metrics.youtube_api_duration_seconds.observe(
                time.monotonic() - start_time, endpoint=endpoint
            )

        metrics.youtube_api_requests_total.inc(endpoint=endpoint, status=str(response.status_code))

        if response.status_code != 200:
            reason = self._error_reason(response)
            logger.error(f"YouTube API error on {endpoint}: {response.status_code} - {reason}")
            raise UpstreamError(
                f"YouTube {endpoint} returned {response.status_code}: {reason}",
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"YouTube {endpoint} returned invalid JSON") from e

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        """Extract the error message from a Google API error body."""
        try:
            error = response.json().get("error", {})
        except ValueError:
            return response.text[:200]
        return error.get("message") or response.reason_phrase

    # ==================== Search ====================

    async def search(
        self,
        query: str,
        type: str,
        part: str = "snippet",
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """Search YouTube.

        Args:
            query: Free-text query
            type: Resource type filter ("channel", "video", "playlist" or a comma list)
            part: Resource parts to return
            max_results: Result cap (provider default of 5 when None)

        Returns:
            Search result items in provider order
        """
        data = await self._get(
            "search",
            {"part": part, "q": query, "type": type, "maxResults": max_results},
        )
        return data.get("items") or []

    # ==================== Channels ====================

    async def get_channel(self, channel_id: str) -> dict[str, Any] | None:
        """Fetch a channel with snippet, statistics and content details."""
        data = await self._get("channels", {"part": YOUTUBE_CHANNEL_PARTS, "id": channel_id})
        items = data.get("items") or []
        return items[0] if items else None

    # ==================== Playlists ====================

    async def list_playlists(self, channel_id: str, page_token: str | None = None) -> Page:
        """Fetch one page of the playlists owned by a channel."""
        data = await self._get(
            "playlists",
            {
                "part": YOUTUBE_PLAYLIST_PARTS,
                "channelId": channel_id,
                "maxResults": YOUTUBE_PAGE_SIZE,
                "pageToken": page_token,
            },
        )
        return Page(items=data.get("items") or [], next_page_token=data.get("nextPageToken"))

    async def get_playlists(self, playlist_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch playlists by id, batched 50 ids per request.

        Returns:
            Dict mapping playlist id to playlist resource
        """
        return await self._batch_lookup("playlists", YOUTUBE_PLAYLIST_PARTS, playlist_ids)

    async def list_playlist_items(self, playlist_id: str, page_token: str | None = None) -> Page:
        """Fetch one page of a playlist's items."""
        data = await self._get(
            "playlistItems",
            {
                "part": YOUTUBE_PLAYLIST_ITEM_PARTS,
                "playlistId": playlist_id,
                "maxResults": YOUTUBE_PAGE_SIZE,
                "pageToken": page_token,
            },
        )
        return Page(items=data.get("items") or [], next_page_token=data.get("nextPageToken"))

    # ==================== Videos ====================

    async def get_videos(self, video_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch full video details, batched 50 ids per request.

        Deleted or private videos are simply absent from the result.

        Returns:
            Dict mapping video id to video resource
        """
        return await self._batch_lookup("videos", YOUTUBE_VIDEO_PARTS, video_ids)

    async def _batch_lookup(
        self, endpoint: str, part: str, ids: list[str]
    ) -> dict[str, dict[str, Any]]:
        found: dict[str, dict[str, Any]] = {}
        for i in range(0, len(ids), YOUTUBE_PAGE_SIZE):
            batch = ids[i:i + YOUTUBE_PAGE_SIZE]
            data = await self._get(endpoint, {"part": part, "id": ",".join(batch)})
            for item in data.get("items") or []:
                found[item["id"]] = item
        return found
