"""YouTube search proxy.

Searches videos and/or playlists, then enriches the hits with one batched
details call per resource type. Results are cached in Redis for 15 minutes.
"""

import logging
from datetime import timedelta
from typing import Any

from pydantic import TypeAdapter

from src.constants import CACHE_TTL_SEARCH, SEARCH_MAX_RESULTS, SEARCH_TYPES
from src.exceptions import InvalidRequestError
from src.models.schemas import PlaylistSearchResult, SearchResult, VideoSearchResult
from src.services.youtube.client import YouTubeClient
from src.services.youtube.ingestion import best_thumbnail
from src.utils.cache import cache, make_cache_key

logger = logging.getLogger(__name__)

_results_adapter = TypeAdapter(list[SearchResult])


def _provider_type(search_type: str) -> str:
    return "video,playlist" if search_type == "all" else search_type


def _video_result(video_id: str, snippet: dict[str, Any], details: dict[str, Any]) -> VideoSearchResult:
    statistics = details.get("statistics") or {}
    return VideoSearchResult(
        id=video_id,
        title=snippet.get("title") or "",
        description=snippet.get("description") or "",
        channel_id=snippet.get("channelId") or "",
        channel_title=snippet.get("channelTitle") or "",
        thumbnail_url=best_thumbnail(snippet),
        published_at=snippet.get("publishedAt"),
        duration=(details.get("contentDetails") or {}).get("duration"),
        view_count=statistics.get("viewCount"),
        like_count=statistics.get("likeCount"),
    )


def _playlist_result(
    playlist_id: str, snippet: dict[str, Any], details: dict[str, Any]
) -> PlaylistSearchResult:
    return PlaylistSearchResult(
        id=playlist_id,
        title=snippet.get("title") or "",
        description=snippet.get("description") or "",
        channel_id=snippet.get("channelId") or "",
        channel_title=snippet.get("channelTitle") or "",
        thumbnail_url=best_thumbnail(snippet),
        item_count=(details.get("contentDetails") or {}).get("itemCount"),
    )


async def search_youtube(
    client: YouTubeClient, query: str, search_type: str = "all"
) -> list[SearchResult]:
    """Search YouTube for videos and playlists.

    Args:
        client: YouTube API client
        query: Free-text query
        search_type: "all", "video" or "playlist"

    Returns:
        Results in provider order

    Raises:
        InvalidRequestError: Empty query or unknown type
        UpstreamError: A YouTube call failed
    """
    query = query.strip()
    if not query:
        raise InvalidRequestError("Search query is required")
    if search_type not in SEARCH_TYPES:
        raise InvalidRequestError(
            f"Invalid search type: {search_type}",
            errors=[{"field": "type", "allowed": list(SEARCH_TYPES)}],
        )

    cache_key = make_cache_key("youtube:search", search_type, query)
    cached = await cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Search cache hit: {cache_key}")
        return _results_adapter.validate_python(cached)

    hits = await client.search(
        query,
        type=_provider_type(search_type),
        part="snippet",
        max_results=SEARCH_MAX_RESULTS,
    )

    video_ids = [hit["id"]["videoId"] for hit in hits if hit.get("id", {}).get("videoId")]
    playlist_ids = [
        hit["id"]["playlistId"] for hit in hits if hit.get("id", {}).get("playlistId")
    ]
    videos = await client.get_videos(video_ids)
    playlists = await client.get_playlists(playlist_ids)

    results: list[SearchResult] = []
    for hit in hits:
        resource_id = hit.get("id") or {}
        snippet = hit.get("snippet") or {}
        if resource_id.get("videoId"):
            video_id = resource_id["videoId"]
            results.append(_video_result(video_id, snippet, videos.get(video_id, {})))
        elif resource_id.get("playlistId"):
            playlist_id = resource_id["playlistId"]
            results.append(_playlist_result(playlist_id, snippet, playlists.get(playlist_id, {})))

    await cache.set(
        cache_key,
        [result.model_dump() for result in results],
        ttl=timedelta(seconds=CACHE_TTL_SEARCH),
    )
    logger.info(f"Search {query!r} ({search_type}): {len(results)} results")
    return results
