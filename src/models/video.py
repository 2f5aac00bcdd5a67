"""YouTube video model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class Video(Base, TimestampMixin):
    """A video discovered while syncing a channel's playlists.

    channel_id is a soft reference to Channel.channel_id (no foreign key):
    it records the channel whose sync first stored the video.
    """

    __tablename__ = "videos"

    id: Mapped[int] = mapped_column(primary_key=True)
    video_id: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    channel_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    published_at: Mapped[str | None] = mapped_column(String(32), nullable=True)  # provider format
    duration: Mapped[str | None] = mapped_column(String(32), nullable=True)  # ISO 8601, e.g. PT4M13S
    view_count: Mapped[str | None] = mapped_column(String(32), nullable=True)
    like_count: Mapped[str | None] = mapped_column(String(32), nullable=True)

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, video_id={self.video_id})>"
