"""SQLAlchemy models."""

from src.models.base import Base
from src.models.channel import Channel
from src.models.playlist import Playlist, PlaylistItem
from src.models.video import Video
from src.models.watch_later import WatchLaterItem

__all__ = [
    "Base",
    "Channel",
    "Playlist",
    "PlaylistItem",
    "Video",
    "WatchLaterItem",
]
