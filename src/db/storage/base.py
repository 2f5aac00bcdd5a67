"""Abstract storage interface for channels, videos and playlists.

Ingestion and the API depend on this contract only; the concrete backend
(PostgreSQL via SQLAlchemy, or in-process memory) is chosen at startup.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager

from src.models import Channel, Playlist, PlaylistItem, Video, WatchLaterItem
from src.models.schemas import ChannelCreate, PlaylistCreate, PlaylistItemCreate, VideoCreate


class Storage(ABC):
    """Read/write capability over the channel-library tables and the watch-later list."""

    # Transactions

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Scope a unit of work: commit on success, roll back on exception.

        Transactions nest; an inner failure rolls back only the inner unit.
        """

    # Channels

    @abstractmethod
    async def get_channels(self) -> Sequence[Channel]:
        """All stored channels in insertion order."""

    @abstractmethod
    async def get_channel(self, id: int) -> Channel | None:
        """Channel by store id."""

    @abstractmethod
    async def get_channel_by_youtube_id(self, channel_id: str) -> Channel | None:
        """Channel by YouTube channel id."""

    @abstractmethod
    async def create_channel(self, data: ChannelCreate) -> Channel:
        """Insert a channel row."""

    @abstractmethod
    async def delete_channel(self, id: int) -> None:
        """Delete one channel row (no cascade)."""

    # Videos

    @abstractmethod
    async def get_videos(self, channel_id: str) -> Sequence[Video]:
        """Videos recorded against a YouTube channel id."""

    @abstractmethod
    async def get_video(self, id: int) -> Video | None:
        """Video by store id."""

    @abstractmethod
    async def get_video_by_youtube_id(self, video_id: str) -> Video | None:
        """Video by YouTube video id."""

    @abstractmethod
    async def create_video(self, data: VideoCreate) -> Video:
        """Insert a video row."""

    @abstractmethod
    async def delete_videos(self, channel_id: str) -> int:
        """Delete the channel's videos that no playlist item references.

        Returns the number of deleted rows.
        """

    # Playlists

    @abstractmethod
    async def get_playlists(self, channel_id: str) -> Sequence[Playlist]:
        """Playlists owned by a YouTube channel id."""

    @abstractmethod
    async def get_playlist(self, id: int) -> Playlist | None:
        """Playlist by store id."""

    @abstractmethod
    async def get_playlist_by_youtube_id(self, playlist_id: str) -> Playlist | None:
        """Playlist by YouTube playlist id."""

    @abstractmethod
    async def create_playlist(self, data: PlaylistCreate) -> Playlist:
        """Insert a playlist row."""

    @abstractmethod
    async def delete_playlists(self, channel_id: str) -> int:
        """Delete every playlist owned by a channel. Returns the row count."""

    # Playlist items

    @abstractmethod
    async def get_playlist_items(self, playlist_id: str) -> Sequence[PlaylistItem]:
        """Items of a playlist ordered by ascending position."""

    @abstractmethod
    async def get_playlist_item(self, playlist_id: str, video_id: str) -> PlaylistItem | None:
        """The item placing video_id in playlist_id, if any."""

    @abstractmethod
    async def create_playlist_item(self, data: PlaylistItemCreate) -> PlaylistItem:
        """Insert a playlist item row."""

    @abstractmethod
    async def delete_playlist_items(self, playlist_id: str) -> int:
        """Delete every item of a playlist. Returns the row count."""

    # Watch later

    @abstractmethod
    async def get_watch_later(self) -> Sequence[WatchLaterItem]:
        """Watch-later entries, oldest first."""

    @abstractmethod
    async def get_watch_later_item(self, video_id: str) -> WatchLaterItem | None:
        """The watch-later entry for a YouTube video id, if any."""

    @abstractmethod
    async def add_to_watch_later(self, video_id: str) -> WatchLaterItem:
        """Insert a watch-later entry."""

    @abstractmethod
    async def remove_from_watch_later(self, video_id: str) -> bool:
        """Delete a watch-later entry. Returns False if there was none."""
