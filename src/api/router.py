"""Main API router."""

from fastapi import APIRouter

from src.api.channels import router as channels_router
from src.api.playlists import router as playlists_router
from src.api.watch_later import router as watch_later_router
from src.api.youtube import router as youtube_router

api_router = APIRouter(prefix="/api")

api_router.include_router(channels_router, prefix="/channels", tags=["channels"])
api_router.include_router(playlists_router, prefix="/playlists", tags=["playlists"])
api_router.include_router(watch_later_router, prefix="/watch-later", tags=["watch-later"])
api_router.include_router(youtube_router, prefix="/youtube", tags=["youtube"])
