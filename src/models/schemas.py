"""Pydantic schemas for API validation and serialization."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.utils.formatting import format_duration, format_subscriber_count, format_view_count


# Channel schemas
class ChannelBase(BaseModel):
    """Base channel schema."""

    channel_id: str = Field(min_length=1)
    title: str
    description: str | None = None
    custom_url: str | None = None
    thumbnail_url: str | None = None
    subscriber_count: str | None = None
    video_count: int | None = None
    view_count: str | None = None


class ChannelCreate(ChannelBase):
    """Channel insert payload."""

    pass


class ChannelRead(ChannelBase):
    """Channel read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def formatted_subscriber_count(self) -> str:
        return format_subscriber_count(self.subscriber_count)


class ChannelAddRequest(BaseModel):
    """Body of POST /api/channels: a channel id or any supported channel URL."""

    url: str = Field(min_length=1)


class ChannelDeleteResponse(BaseModel):
    """Result of a cascading channel delete."""

    success: bool


# Video schemas
class VideoBase(BaseModel):
    """Base video schema."""

    video_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    published_at: str | None = None
    duration: str | None = None
    view_count: str | None = None
    like_count: str | None = None


class VideoCreate(VideoBase):
    """Video insert payload."""

    pass


class VideoRead(VideoBase):
    """Video read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def formatted_view_count(self) -> str:
        return format_view_count(self.view_count)


class PlaylistVideoRead(VideoRead):
    """A stored video together with its position in a playlist."""

    position: int


class WatchLaterAddRequest(BaseModel):
    """Body of POST /api/watch-later: the YouTube id of a stored video."""

    video_id: str = Field(min_length=1)


# Playlist schemas
class PlaylistBase(BaseModel):
    """Base playlist schema."""

    playlist_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    item_count: int | None = None


class PlaylistCreate(PlaylistBase):
    """Playlist insert payload."""

    pass


class PlaylistRead(PlaylistBase):
    """Playlist read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# Playlist item schemas
class PlaylistItemCreate(BaseModel):
    """Playlist item insert payload."""

    playlist_id: str = Field(min_length=1)
    video_id: str = Field(min_length=1)
    position: int = Field(ge=0)


class PlaylistItemRead(PlaylistItemCreate):
    """Playlist item read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


# YouTube search schemas
class VideoSearchResult(BaseModel):
    """A video hit from the YouTube search proxy."""

    id: str
    type: Literal["video"] = "video"
    title: str
    description: str = ""
    channel_id: str = ""
    channel_title: str = ""
    thumbnail_url: str | None = None
    published_at: str | None = None
    duration: str | None = None
    view_count: str | None = None
    like_count: str | None = None


class PlaylistSearchResult(BaseModel):
    """A playlist hit from the YouTube search proxy."""

    id: str
    type: Literal["playlist"] = "playlist"
    title: str
    description: str = ""
    channel_id: str = ""
    channel_title: str = ""
    thumbnail_url: str | None = None
    item_count: int | None = None


SearchResult = VideoSearchResult | PlaylistSearchResult


# Error schema
class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    message: str
    errors: list | None = None
