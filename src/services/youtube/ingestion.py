"""Channel ingestion: onboarding, playlist/video synchronization, deletion.

Onboarding a channel fetches the channel, stores it with a synthetic
Uploads playlist, then walks every playlist page by page, storing each new
playlist and its videos. Rows are write-once: anything already stored is
skipped, never refreshed.

Transactions:
    add_channel           one unit around the whole onboarding
    sync_channel_playlists one unit per new playlist (row + its items)
    sync_playlist_videos  one unit per call
    delete_channel        one unit around the cascade

Sync steps log and swallow their own failures so a broken playlist only
truncates that sync; the failing unit is rolled back.
"""

import logging
from dataclasses import dataclass
from typing import Any

from src.constants import (
    THUMBNAIL_PREFERENCE,
    UPLOADS_PLAYLIST_DESCRIPTION,
    UPLOADS_PLAYLIST_TITLE,
)
from src.db.storage import Storage
from src.exceptions import NotFoundError
from src.models import Channel
from src.models.schemas import ChannelCreate, PlaylistCreate, PlaylistItemCreate, VideoCreate
from src.services.youtube.client import YouTubeClient
from src.services.youtube.resolver import resolve_channel_reference
from src.utils.logging import LogContext
from src.utils.metrics import metrics

logger = logging.getLogger(__name__)


@dataclass
class PlaylistSyncResult:
    """Result of a channel's playlist sync."""

    added: int = 0
    skipped: int = 0
    failed: bool = False


@dataclass
class VideoSyncResult:
    """Result of one playlist's video sync."""

    items_added: int = 0
    videos_added: int = 0
    missing: int = 0
    duplicates: int = 0
    failed: bool = False


def best_thumbnail(snippet: dict[str, Any]) -> str | None:
    """Pick the high thumbnail, then default."""
    thumbnails = snippet.get("thumbnails") or {}
    for quality in THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(quality) or {}).get("url")
        if url:
            return url
    return None


def _parse_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def channel_from_resource(resource: dict[str, Any]) -> ChannelCreate:
    """Build the channel insert payload from a /channels resource."""
    snippet = resource.get("snippet") or {}
    statistics = resource.get("statistics") or {}
    return ChannelCreate(
        channel_id=resource.get("id"),
        title=snippet.get("title"),
        description=snippet.get("description"),
        custom_url=snippet.get("customUrl"),
        thumbnail_url=best_thumbnail(snippet),
        subscriber_count=statistics.get("subscriberCount"),
        video_count=_parse_int(statistics.get("videoCount")),
        view_count=statistics.get("viewCount"),
    )


def uploads_playlist_from_resource(resource: dict[str, Any]) -> PlaylistCreate:
    """Build the synthetic Uploads playlist for a /channels resource."""
    snippet = resource.get("snippet") or {}
    related = (resource.get("contentDetails") or {}).get("relatedPlaylists") or {}
    return PlaylistCreate(
        playlist_id=related.get("uploads"),
        channel_id=resource.get("id"),
        title=UPLOADS_PLAYLIST_TITLE,
        description=UPLOADS_PLAYLIST_DESCRIPTION,
        thumbnail_url=best_thumbnail(snippet),
        item_count=_parse_int((resource.get("statistics") or {}).get("videoCount")),
    )


def playlist_from_resource(resource: dict[str, Any], channel_id: str) -> PlaylistCreate:
    """Build a playlist insert payload from a /playlists resource."""
    snippet = resource.get("snippet") or {}
    return PlaylistCreate(
        playlist_id=resource.get("id"),
        channel_id=channel_id,
        title=snippet.get("title"),
        description=snippet.get("description"),
        thumbnail_url=best_thumbnail(snippet),
        item_count=(resource.get("contentDetails") or {}).get("itemCount"),
    )


def video_from_resource(resource: dict[str, Any], channel_id: str) -> VideoCreate:
    """Build a video insert payload from a /videos resource."""
    snippet = resource.get("snippet") or {}
    statistics = resource.get("statistics") or {}
    return VideoCreate(
        video_id=resource.get("id"),
        channel_id=channel_id,
        title=snippet.get("title"),
        description=snippet.get("description"),
        thumbnail_url=best_thumbnail(snippet),
        published_at=snippet.get("publishedAt"),
        duration=(resource.get("contentDetails") or {}).get("duration"),
        view_count=statistics.get("viewCount"),
        like_count=statistics.get("likeCount"),
    )


def playlist_item_video_id(item: dict[str, Any]) -> str | None:
    """The video id a /playlistItems entry points at."""
    resource_id = (item.get("snippet") or {}).get("resourceId") or {}
    return resource_id.get("videoId")


class ChannelIngestionService:
    """Imports channels from YouTube into a Storage backend."""

    def __init__(self, storage: Storage, client: YouTubeClient) -> None:
        self.storage = storage
        self.client = client

    async def add_channel(self, reference: str) -> tuple[Channel, bool]:
        """Resolve a channel reference and onboard the channel.

        Idempotent on the canonical id: a channel that is already stored is
        returned as-is without contacting YouTube again.

        Args:
            reference: Channel id or channel URL

        Returns:
            (channel, created) where created is False for an existing channel

        Raises:
            InvalidReferenceError, NotFoundError, UpstreamError, pydantic.ValidationError
        """
        channel_id = await resolve_channel_reference(reference, self.client)
        log = LogContext(logger, channel=channel_id)

        existing = await self.storage.get_channel_by_youtube_id(channel_id)
        if existing:
            log.info("Channel already stored, skipping import")
            return existing, False

        resource = await self.client.get_channel(channel_id)
        if not resource:
            raise NotFoundError("Channel not found")

        async with self.storage.transaction():
            channel = await self.storage.create_channel(channel_from_resource(resource))
            uploads = await self.storage.create_playlist(uploads_playlist_from_resource(resource))
            log.info(f"Stored channel {channel.title!r}, uploads playlist {uploads.playlist_id}")

            uploads_id = uploads.playlist_id
            playlists = await self.sync_channel_playlists(channel_id)
            videos = await self.sync_playlist_videos(uploads_id, channel_id)

        metrics.channels_onboarded_total.inc()
        log.info(
            f"Import finished: {playlists.added} playlists added, "
            f"{videos.items_added} uploads stored"
        )
        return channel, True

    async def sync_channel_playlists(self, channel_id: str) -> PlaylistSyncResult:
        """Store every playlist of a channel that is not stored yet.

        Each new playlist is committed together with its videos. A failure
        aborts the remaining pages; playlists committed before it remain.
        """
        result = PlaylistSyncResult()
        log = LogContext(logger, channel=channel_id)
        page_token: str | None = None

        try:
            while True:
                page = await self.client.list_playlists(channel_id, page_token)

                for item in page.items:
                    if await self.storage.get_playlist_by_youtube_id(item.get("id")):
                        result.skipped += 1
                        continue

                    async with self.storage.transaction():
                        playlist = await self.storage.create_playlist(
                            playlist_from_resource(item, channel_id)
                        )
                        await self.sync_playlist_videos(playlist.playlist_id, channel_id)
                    result.added += 1

                page_token = page.next_page_token
                if not page_token:
                    break

        except Exception as e:
            log.exception(f"Error fetching channel playlists: {e}")
            result.failed = True

        metrics.playlists_synced_total.inc(outcome="failed" if result.failed else "ok")
        log.info(f"Playlist sync: {result.added} added, {result.skipped} already stored")
        return result

    async def sync_playlist_videos(self, playlist_id: str, channel_id: str) -> VideoSyncResult:
        """Store a playlist's items and any videos not stored yet.

        Video details are fetched in one batched call per page. Items whose
        details are missing (deleted or private videos) and repeats of a video
        already placed in the playlist are skipped without taking a position,
        so positions stay dense.
        """
        result = VideoSyncResult()
        log = LogContext(logger, channel=channel_id, playlist=playlist_id)

        try:
            async with self.storage.transaction():
                page_token: str | None = None
                position = 0

                while True:
                    page = await self.client.list_playlist_items(playlist_id, page_token)

                    if page.items:
                        video_ids = [playlist_item_video_id(item) for item in page.items]
                        details = await self.client.get_videos([v for v in video_ids if v])

                        for video_id in video_ids:
                            resource = details.get(video_id) if video_id else None
                            if resource is None:
                                result.missing += 1
                                continue

                            video = await self.storage.get_video_by_youtube_id(video_id)
                            if video is None:
                                await self.storage.create_video(
                                    video_from_resource(resource, channel_id)
                                )
                                result.videos_added += 1

                            if await self.storage.get_playlist_item(playlist_id, video_id):
                                result.duplicates += 1
                                continue

                            item_position = position
                            position += 1

                            await self.storage.create_playlist_item(
                                PlaylistItemCreate(
                                    playlist_id=playlist_id,
                                    video_id=video_id,
                                    position=item_position,
                                )
                            )
                            result.items_added += 1

                    page_token = page.next_page_token
                    if not page_token:
                        break

        except Exception as e:
            log.exception(f"Error fetching playlist videos: {e}")
            return VideoSyncResult(failed=True)

        metrics.videos_stored_total.inc(result.videos_added)
        if result.missing:
            log.debug(f"Skipped {result.missing} unavailable videos")
        return result

    async def delete_channel(self, id: int) -> bool:
        """Delete a channel and everything it owns.

        Order: each playlist's items, the playlists, the channel's videos
        (except ones still placed in another channel's playlist), the channel.

        Returns:
            True on success, False if any step failed (all steps rolled back)

        Raises:
            NotFoundError: Unknown channel id
        """
        channel = await self.storage.get_channel(id)
        if channel is None:
            raise NotFoundError("Channel not found")

        channel_id = channel.channel_id
        log = LogContext(logger, channel=channel_id)

        try:
            async with self.storage.transaction():
                playlists = await self.storage.get_playlists(channel_id)
                items = 0
                for playlist in playlists:
                    items += await self.storage.delete_playlist_items(playlist.playlist_id)
                await self.storage.delete_playlists(channel_id)
                videos = await self.storage.delete_videos(channel_id)
                await self.storage.delete_channel(id)
        except Exception as e:
            log.exception(f"Error deleting channel: {e}")
            return False

        log.info(f"Deleted channel with {len(playlists)} playlists, {items} items, {videos} videos")
        return True
