"""Watch-later list model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class WatchLaterItem(Base, TimestampMixin):
    """A stored video the user saved to watch later.

    video_id is a soft reference to Video.video_id; entries whose video has
    since been deleted are hidden when the list is read.
    """

    __tablename__ = "watch_later"

    id: Mapped[int] = mapped_column(primary_key=True)
    video_id: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)

    def __repr__(self) -> str:
        return f"<WatchLaterItem(video_id={self.video_id})>"
