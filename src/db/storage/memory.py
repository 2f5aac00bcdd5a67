"""In-process storage backend.

Rows live in per-table dicts keyed by an incrementing id, standing in for
the database's identity columns. Used by the test suite and when
STORAGE_BACKEND=memory; nothing survives a restart.

The store is shared by every request, so a rollback must not touch rows
written by other tasks. Each transaction() keeps an undo log of the rows
its own task inserted or deleted and reverses only those.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from src.db.storage.base import Storage
from src.models import Channel, Playlist, PlaylistItem, Video, WatchLaterItem
from src.models.base import utcnow
from src.models.schemas import ChannelCreate, PlaylistCreate, PlaylistItemCreate, VideoCreate

# (table, row id, previous row or None for an insert)
UndoEntry = tuple[dict[int, Any], int, Any]

_undo_log: ContextVar[list[UndoEntry] | None] = ContextVar("memory_undo_log", default=None)


def _record(table: dict[int, Any], id: int, previous: Any) -> None:
    log = _undo_log.get()
    if log is not None:
        log.append((table, id, previous))


class MemoryStorage(Storage):
    """Dict-backed Storage implementation."""

    def __init__(self) -> None:
        self.channels: dict[int, Channel] = {}
        self.videos: dict[int, Video] = {}
        self.playlists: dict[int, Playlist] = {}
        self.playlist_items: dict[int, PlaylistItem] = {}
        self.watch_later: dict[int, WatchLaterItem] = {}

        self._channel_id_counter = 1
        self._video_id_counter = 1
        self._playlist_id_counter = 1
        self._playlist_item_id_counter = 1
        self._watch_later_id_counter = 1

    # Transactions

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        # Id counters are not restored, like a database sequence.
        parent = _undo_log.get()
        entries: list[UndoEntry] = []
        token = _undo_log.set(entries)
        try:
            yield
        except Exception:
            for table, id, previous in reversed(entries):
                if previous is None:
                    table.pop(id, None)
                else:
                    table[id] = previous
            raise
        else:
            if parent is not None:
                parent.extend(entries)
        finally:
            _undo_log.reset(token)

    @staticmethod
    def _insert(table: dict[int, Any], row: Any) -> Any:
        table[row.id] = row
        _record(table, row.id, None)
        return row

    @staticmethod
    def _delete_rows(table: dict[int, Any], ids: list[int]) -> int:
        for id in ids:
            _record(table, id, table.pop(id))
        return len(ids)

    @staticmethod
    def _ordered(rows) -> list:
        # Rows restored by a rollback re-enter their dict at the end
        return sorted(rows, key=lambda row: row.id)

    # Channels

    async def get_channels(self) -> Sequence[Channel]:
        return self._ordered(self.channels.values())

    async def get_channel(self, id: int) -> Channel | None:
        return self.channels.get(id)

    async def get_channel_by_youtube_id(self, channel_id: str) -> Channel | None:
        return next(
            (channel for channel in self.channels.values() if channel.channel_id == channel_id),
            None,
        )

    async def create_channel(self, data: ChannelCreate) -> Channel:
        id = self._channel_id_counter
        self._channel_id_counter += 1
        return self._insert(self.channels, Channel(id=id, created_at=utcnow(), **data.model_dump()))

    async def delete_channel(self, id: int) -> None:
        if id in self.channels:
            self._delete_rows(self.channels, [id])

    # Videos

    async def get_videos(self, channel_id: str) -> Sequence[Video]:
        return self._ordered(video for video in self.videos.values() if video.channel_id == channel_id)

    async def get_video(self, id: int) -> Video | None:
        return self.videos.get(id)

    async def get_video_by_youtube_id(self, video_id: str) -> Video | None:
        return next(
            (video for video in self.videos.values() if video.video_id == video_id),
            None,
        )

    async def create_video(self, data: VideoCreate) -> Video:
        id = self._video_id_counter
        self._video_id_counter += 1
        return self._insert(self.videos, Video(id=id, created_at=utcnow(), **data.model_dump()))

    async def delete_videos(self, channel_id: str) -> int:
        referenced = {item.video_id for item in self.playlist_items.values()}
        doomed = [
            id
            for id, video in self.videos.items()
            if video.channel_id == channel_id and video.video_id not in referenced
        ]
        return self._delete_rows(self.videos, doomed)

    # Playlists

    async def get_playlists(self, channel_id: str) -> Sequence[Playlist]:
        return self._ordered(
            playlist for playlist in self.playlists.values() if playlist.channel_id == channel_id
        )

    async def get_playlist(self, id: int) -> Playlist | None:
        return self.playlists.get(id)

    async def get_playlist_by_youtube_id(self, playlist_id: str) -> Playlist | None:
        return next(
            (playlist for playlist in self.playlists.values() if playlist.playlist_id == playlist_id),
            None,
        )

    async def create_playlist(self, data: PlaylistCreate) -> Playlist:
        id = self._playlist_id_counter
        self._playlist_id_counter += 1
        return self._insert(self.playlists, Playlist(id=id, created_at=utcnow(), **data.model_dump()))

    async def delete_playlists(self, channel_id: str) -> int:
        doomed = [id for id, playlist in self.playlists.items() if playlist.channel_id == channel_id]
        return self._delete_rows(self.playlists, doomed)

    # Playlist items

    async def get_playlist_items(self, playlist_id: str) -> Sequence[PlaylistItem]:
        items = [item for item in self.playlist_items.values() if item.playlist_id == playlist_id]
        return sorted(items, key=lambda item: item.position)

    async def get_playlist_item(self, playlist_id: str, video_id: str) -> PlaylistItem | None:
        return next(
            (
                item
                for item in self.playlist_items.values()
                if item.playlist_id == playlist_id and item.video_id == video_id
            ),
            None,
        )

    async def create_playlist_item(self, data: PlaylistItemCreate) -> PlaylistItem:
        id = self._playlist_item_id_counter
        self._playlist_item_id_counter += 1
        return self._insert(
            self.playlist_items, PlaylistItem(id=id, created_at=utcnow(), **data.model_dump())
        )

    async def delete_playlist_items(self, playlist_id: str) -> int:
        doomed = [id for id, item in self.playlist_items.items() if item.playlist_id == playlist_id]
        return self._delete_rows(self.playlist_items, doomed)

    # Watch later

    async def get_watch_later(self) -> Sequence[WatchLaterItem]:
        return self._ordered(self.watch_later.values())

    async def get_watch_later_item(self, video_id: str) -> WatchLaterItem | None:
        return next(
            (item for item in self.watch_later.values() if item.video_id == video_id),
            None,
        )

    async def add_to_watch_later(self, video_id: str) -> WatchLaterItem:
        id = self._watch_later_id_counter
        self._watch_later_id_counter += 1
        return self._insert(
            self.watch_later, WatchLaterItem(id=id, video_id=video_id, created_at=utcnow())
        )

    async def remove_from_watch_later(self, video_id: str) -> bool:
        doomed = [id for id, item in self.watch_later.items() if item.video_id == video_id]
        return self._delete_rows(self.watch_later, doomed) > 0
