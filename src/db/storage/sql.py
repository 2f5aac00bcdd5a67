"""SQLAlchemy storage backend.

Identities come from the database. The outermost transaction() commits or
rolls back the session; nested ones map to SAVEPOINTs.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.storage.base import Storage
from src.exceptions import StoreError
from src.models import Channel, Playlist, PlaylistItem, Video, WatchLaterItem
from src.models.schemas import ChannelCreate, PlaylistCreate, PlaylistItemCreate, VideoCreate


class SqlStorage(Storage):
    """Storage implementation over an AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._depth = 0

    # Transactions

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                async with self.session.begin_nested():
                    yield
            finally:
                self._depth -= 1
            return

        self._depth += 1
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        finally:
            self._depth -= 1

    async def _add(self, row):
        self.session.add(row)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to insert {type(row).__name__}: {e}") from e
        return row

    # Channels

    async def get_channels(self) -> Sequence[Channel]:
        result = await self.session.execute(select(Channel).order_by(Channel.id))
        return result.scalars().all()

    async def get_channel(self, id: int) -> Channel | None:
        return await self.session.get(Channel, id)

    async def get_channel_by_youtube_id(self, channel_id: str) -> Channel | None:
        result = await self.session.execute(select(Channel).where(Channel.channel_id == channel_id))
        return result.scalar_one_or_none()

    async def create_channel(self, data: ChannelCreate) -> Channel:
        return await self._add(Channel(**data.model_dump()))

    async def delete_channel(self, id: int) -> None:
        await self.session.execute(delete(Channel).where(Channel.id == id))

    # Videos

    async def get_videos(self, channel_id: str) -> Sequence[Video]:
        result = await self.session.execute(
            select(Video).where(Video.channel_id == channel_id).order_by(Video.id)
        )
        return result.scalars().all()

    async def get_video(self, id: int) -> Video | None:
        return await self.session.get(Video, id)

    async def get_video_by_youtube_id(self, video_id: str) -> Video | None:
        result = await self.session.execute(select(Video).where(Video.video_id == video_id))
        return result.scalar_one_or_none()

    async def create_video(self, data: VideoCreate) -> Video:
        return await self._add(Video(**data.model_dump()))

    async def delete_videos(self, channel_id: str) -> int:
        still_referenced = (
            select(PlaylistItem.id)
            .where(PlaylistItem.video_id == Video.video_id)
            .correlate(Video)
            .exists()
        )
        result = await self.session.execute(
            delete(Video)
            .where(Video.channel_id == channel_id, ~still_referenced)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # Playlists

    async def get_playlists(self, channel_id: str) -> Sequence[Playlist]:
        result = await self.session.execute(
            select(Playlist).where(Playlist.channel_id == channel_id).order_by(Playlist.id)
        )
        return result.scalars().all()

    async def get_playlist(self, id: int) -> Playlist | None:
        return await self.session.get(Playlist, id)

    async def get_playlist_by_youtube_id(self, playlist_id: str) -> Playlist | None:
        result = await self.session.execute(
            select(Playlist).where(Playlist.playlist_id == playlist_id)
        )
        return result.scalar_one_or_none()

    async def create_playlist(self, data: PlaylistCreate) -> Playlist:
        return await self._add(Playlist(**data.model_dump()))

    async def delete_playlists(self, channel_id: str) -> int:
        result = await self.session.execute(
            delete(Playlist).where(Playlist.channel_id == channel_id)
        )
        return result.rowcount

    # Playlist items

    async def get_playlist_items(self, playlist_id: str) -> Sequence[PlaylistItem]:
        result = await self.session.execute(
            select(PlaylistItem)
            .where(PlaylistItem.playlist_id == playlist_id)
            .order_by(PlaylistItem.position)
        )
        return result.scalars().all()

    async def get_playlist_item(self, playlist_id: str, video_id: str) -> PlaylistItem | None:
        result = await self.session.execute(
            select(PlaylistItem)
            .where(PlaylistItem.playlist_id == playlist_id, PlaylistItem.video_id == video_id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_playlist_item(self, data: PlaylistItemCreate) -> PlaylistItem:
        return await self._add(PlaylistItem(**data.model_dump()))

    async def delete_playlist_items(self, playlist_id: str) -> int:
        result = await self.session.execute(
            delete(PlaylistItem).where(PlaylistItem.playlist_id == playlist_id)
        )
        return result.rowcount

    # Watch later

    async def get_watch_later(self) -> Sequence[WatchLaterItem]:
        result = await self.session.execute(select(WatchLaterItem).order_by(WatchLaterItem.id))
        return result.scalars().all()

    async def get_watch_later_item(self, video_id: str) -> WatchLaterItem | None:
        result = await self.session.execute(
            select(WatchLaterItem).where(WatchLaterItem.video_id == video_id)
        )
        return result.scalar_one_or_none()

    async def add_to_watch_later(self, video_id: str) -> WatchLaterItem:
        return await self._add(WatchLaterItem(video_id=video_id))

    async def remove_from_watch_later(self, video_id: str) -> bool:
        result = await self.session.execute(
            delete(WatchLaterItem).where(WatchLaterItem.video_id == video_id)
        )
        return result.rowcount > 0
