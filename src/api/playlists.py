"""Playlist API endpoints."""

from fastapi import APIRouter, HTTPException

from src.api.dependencies import StorageDep
from src.models.schemas import PlaylistRead, PlaylistVideoRead, VideoRead

router = APIRouter()


@router.get("/{playlist_id}", response_model=PlaylistRead)
async def get_playlist_endpoint(playlist_id: str, storage: StorageDep) -> PlaylistRead:
    """Get a playlist by its external id."""
    playlist = await storage.get_playlist_by_youtube_id(playlist_id)
    if not playlist:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return PlaylistRead.model_validate(playlist)


@router.get("/{playlist_id}/videos", response_model=list[PlaylistVideoRead])
async def list_playlist_videos(playlist_id: str, storage: StorageDep) -> list[PlaylistVideoRead]:
    """List a playlist's videos in position order."""
    items = await storage.get_playlist_items(playlist_id)

    videos: list[PlaylistVideoRead] = []
    for item in items:
        video = await storage.get_video_by_youtube_id(item.video_id)
        if video is None:
            continue
        data = VideoRead.model_validate(video).model_dump(include=set(VideoRead.model_fields))
        videos.append(PlaylistVideoRead(**data, position=item.position))
    return videos
