"""Channel API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response

from src.api.dependencies import IngestionDep, StorageDep
from src.models.schemas import (
    ChannelAddRequest,
    ChannelDeleteResponse,
    ChannelRead,
    PlaylistRead,
    VideoRead,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=ChannelRead, status_code=201)
async def add_channel_endpoint(
    data: ChannelAddRequest,
    response: Response,
    service: IngestionDep,
) -> ChannelRead:
    """Onboard a channel from its id or URL.

    Answers 201 when the channel was imported, 200 when it was already stored.
    """
    channel, created = await service.add_channel(data.url)
    if not created:
        response.status_code = 200
    return ChannelRead.model_validate(channel)


@router.get("", response_model=list[ChannelRead])
async def list_channels(storage: StorageDep) -> list[ChannelRead]:
    """List all stored channels."""
    channels = await storage.get_channels()
    return [ChannelRead.model_validate(c) for c in channels]


@router.get("/{id:int}", response_model=ChannelRead)
async def get_channel_endpoint(id: int, storage: StorageDep) -> ChannelRead:
    """Get a single channel by its store id."""
    channel = await storage.get_channel(id)
    if not channel:
        raise HTTPException(status_code=404, detail="Channel not found")
    return ChannelRead.model_validate(channel)


@router.delete("/{id:int}", response_model=ChannelDeleteResponse)
async def delete_channel_endpoint(id: int, service: IngestionDep) -> ChannelDeleteResponse:
    """Delete a channel with its playlists, items and videos."""
    deleted = await service.delete_channel(id)
    if not deleted:
        raise HTTPException(status_code=500, detail="Failed to delete channel")
    return ChannelDeleteResponse(success=True)


@router.get("/{channel_id}/videos", response_model=list[VideoRead])
async def list_channel_videos(channel_id: str, storage: StorageDep) -> list[VideoRead]:
    """List stored videos of a channel (external channel id)."""
    videos = await storage.get_videos(channel_id)
    return [VideoRead.model_validate(v) for v in videos]


@router.get("/{channel_id}/playlists", response_model=list[PlaylistRead])
async def list_channel_playlists(
    channel_id: str,
    storage: StorageDep,
    service: IngestionDep,
    refresh: Annotated[bool, Query()] = False,
) -> list[PlaylistRead]:
    """List stored playlists of a channel.

    With refresh=true, playlists created on YouTube since the last sync are
    imported first.
    """
    if refresh:
        async with storage.transaction():
            result = await service.sync_channel_playlists(channel_id)
        logger.info(f"Refreshed playlists for {channel_id}: {result.added} new")

    playlists = await storage.get_playlists(channel_id)
    return [PlaylistRead.model_validate(p) for p in playlists]
