"""Watch-later API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Response

from src.api.dependencies import StorageDep
from src.models.schemas import VideoRead, WatchLaterAddRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[VideoRead])
async def list_watch_later(storage: StorageDep) -> list[VideoRead]:
    """List saved videos, oldest entry first."""
    entries = await storage.get_watch_later()

    videos: list[VideoRead] = []
    for entry in entries:
        video = await storage.get_video_by_youtube_id(entry.video_id)
        if video is None:
            continue
        videos.append(VideoRead.model_validate(video))
    return videos


@router.post("", response_model=VideoRead, status_code=201)
async def add_to_watch_later(
    data: WatchLaterAddRequest,
    response: Response,
    storage: StorageDep,
) -> VideoRead:
    """Save a stored video for later.

    Answers 201 when the video was added, 200 when it was already listed.
    """
    video = await storage.get_video_by_youtube_id(data.video_id)
    if video is None:
        raise HTTPException(status_code=404, detail="Video not found")

    if await storage.get_watch_later_item(data.video_id):
        response.status_code = 200
    else:
        async with storage.transaction():
            await storage.add_to_watch_later(data.video_id)
        logger.info(f"Added {data.video_id} to watch later")

    return VideoRead.model_validate(video)


@router.delete("/{video_id}")
async def remove_from_watch_later(video_id: str, storage: StorageDep) -> dict:
    """Remove a video from the watch-later list."""
    async with storage.transaction():
        removed = await storage.remove_from_watch_later(video_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Video not in watch later")
    return {"success": True}
