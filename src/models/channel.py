"""YouTube channel model."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class Channel(Base, TimestampMixin):
    """A channel registered by the user, keyed by its YouTube channel id."""

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(primary_key=True)
    channel_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # YouTube returns arbitrary-precision counts as strings; keep them opaque
    subscriber_count: Mapped[str | None] = mapped_column(String(32), nullable=True)
    video_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    view_count: Mapped[str | None] = mapped_column(String(32), nullable=True)

    def __repr__(self) -> str:
        return f"<Channel(id={self.id}, channel_id={self.channel_id})>"
