"""YouTube playlist and playlist item models."""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class Playlist(Base, TimestampMixin):
    """A playlist owned by a channel (including the synthetic Uploads playlist)."""

    __tablename__ = "playlists"

    id: Mapped[int] = mapped_column(primary_key=True)
    playlist_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    channel_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # Declared by YouTube; may drift from the number of stored items
    item_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, playlist_id={self.playlist_id})>"


class PlaylistItem(Base, TimestampMixin):
    """Join row placing a video at an ordinal position in a playlist.

    (playlist_id, video_id) is kept unique by the sync logic, not by a constraint.
    """

    __tablename__ = "playlist_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    playlist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    video_id: Mapped[str] = mapped_column(String(20), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_playlist_items_playlist_position", "playlist_id", "position"),
        Index("ix_playlist_items_playlist_video", "playlist_id", "video_id"),
    )

    def __repr__(self) -> str:
        return f"<PlaylistItem(playlist_id={self.playlist_id}, video_id={self.video_id}, position={self.position})>"
