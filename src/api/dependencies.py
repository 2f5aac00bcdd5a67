"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from src.config import get_settings
from src.db import get_storage
from src.db.storage import Storage
from src.services.youtube import ChannelIngestionService, YouTubeClient


def get_youtube_client() -> YouTubeClient:
    """YouTube client bound to the configured API key."""
    settings = get_settings()
    return YouTubeClient(api_key=settings.youtube_api_key, base_url=settings.youtube_api_base)


def get_ingestion_service(
    storage: Annotated[Storage, Depends(get_storage)],
    client: Annotated[YouTubeClient, Depends(get_youtube_client)],
) -> ChannelIngestionService:
    return ChannelIngestionService(storage, client)


StorageDep = Annotated[Storage, Depends(get_storage)]
YouTubeClientDep = Annotated[YouTubeClient, Depends(get_youtube_client)]
IngestionDep = Annotated[ChannelIngestionService, Depends(get_ingestion_service)]
