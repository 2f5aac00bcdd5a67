"""YouTube search proxy endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query

from src.api.dependencies import YouTubeClientDep
from src.models.schemas import SearchResult
from src.services.youtube import search_youtube

router = APIRouter()


@router.get("/search", response_model=list[SearchResult])
async def search_endpoint(
    client: YouTubeClientDep,
    q: Annotated[str, Query()] = "",
    type: Annotated[Literal["all", "video", "playlist"], Query()] = "all",
) -> list[SearchResult]:
    """Search YouTube videos and playlists."""
    return await search_youtube(client, q, type)
