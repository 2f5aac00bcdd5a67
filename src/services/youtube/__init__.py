"""YouTube services module."""

from src.services.youtube.client import Page, YouTubeClient
from src.services.youtube.ingestion import (
    ChannelIngestionService,
    PlaylistSyncResult,
    VideoSyncResult,
)
from src.services.youtube.resolver import resolve_channel_reference
from src.services.youtube.search import search_youtube

__all__ = [
    "ChannelIngestionService",
    "Page",
    "PlaylistSyncResult",
    "VideoSyncResult",
    "YouTubeClient",
    "resolve_channel_reference",
    "search_youtube",
]
