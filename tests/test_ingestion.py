"""Tests for channel ingestion against both storage backends."""

import asyncio

import pytest
from pydantic import ValidationError

from fakes import FakeYouTubeClient, channel_resource
from src.db.storage import MemoryStorage, Storage
from src.exceptions import InvalidReferenceError, NotFoundError
from src.services.youtube import ChannelIngestionService

CHANNEL = "UC_test_channel"
UPLOADS = "UU_test_channel"


def _video_ids(prefix: str, count: int) -> list[str]:
    return [f"{prefix}{i:03d}" for i in range(count)]


class TestAddChannel:
    """Tests for onboarding a channel."""

    @pytest.mark.asyncio
    async def test_add_channel_stores_channel_and_uploads(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that onboarding stores the channel, its uploads playlist and videos."""
        youtube.add_channel(CHANNEL, uploads=["vid_a", "vid_b"], title="Lofi Girl")

        channel, created = await service.add_channel(CHANNEL)

        assert created is True
        assert channel.channel_id == CHANNEL
        assert channel.title == "Lofi Girl"
        assert channel.video_count == 2
        assert channel.subscriber_count == "1500"
        assert channel.thumbnail_url.endswith("/high.jpg")

        uploads = await storage.get_playlist_by_youtube_id(UPLOADS)
        assert uploads is not None
        assert uploads.title == "Uploads"
        assert uploads.description == "All videos uploaded to this channel"
        assert uploads.item_count == 2

        items = await storage.get_playlist_items(UPLOADS)
        assert [(i.video_id, i.position) for i in items] == [("vid_a", 0), ("vid_b", 1)]
        assert len(await storage.get_videos(CHANNEL)) == 2

    @pytest.mark.asyncio
    async def test_add_channel_is_idempotent(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that re-adding returns the existing row without calling YouTube."""
        youtube.add_channel(CHANNEL, uploads=["vid_a"])
        first, _ = await service.add_channel(CHANNEL)
        youtube.calls.clear()

        second, created = await service.add_channel(f"https://www.youtube.com/channel/{CHANNEL}")

        assert created is False
        assert second.id == first.id
        assert youtube.calls == []
        assert len(await storage.get_channels()) == 1

    @pytest.mark.asyncio
    async def test_add_channel_from_handle(
        self, service: ChannelIngestionService, youtube: FakeYouTubeClient
    ):
        """Test onboarding from an @handle URL."""
        youtube.add_channel(CHANNEL)
        youtube.search_results["lofigirl"] = [{"id": {"kind": "youtube#channel", "channelId": CHANNEL}}]

        channel, created = await service.add_channel("https://www.youtube.com/@lofigirl")

        assert created is True
        assert channel.channel_id == CHANNEL

    @pytest.mark.asyncio
    async def test_add_unknown_channel(
        self, service: ChannelIngestionService, storage: Storage
    ):
        """Test that a channel YouTube does not know raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.add_channel("UC_missing")
        assert await storage.get_channels() == []

    @pytest.mark.asyncio
    async def test_add_empty_reference(self, service: ChannelIngestionService):
        """Test that an empty reference is rejected."""
        with pytest.raises(InvalidReferenceError):
            await service.add_channel("   ")

    @pytest.mark.asyncio
    async def test_missing_uploads_id_rolls_back_channel(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that a channel without an uploads playlist id is not half-stored."""
        youtube.channels[CHANNEL] = channel_resource(CHANNEL, uploads_id=None)

        with pytest.raises(ValidationError):
            await service.add_channel(CHANNEL)

        assert await storage.get_channel_by_youtube_id(CHANNEL) is None
        assert await storage.get_playlists(CHANNEL) == []

    @pytest.mark.asyncio
    async def test_playlist_listing_failure_keeps_channel(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that a failing playlist listing does not abort onboarding."""
        youtube.add_channel(CHANNEL, uploads=["vid_a"], playlists={"PL_one": ["vid_a"]})
        youtube.fail_playlist_listing = True

        channel, created = await service.add_channel(CHANNEL)

        assert created is True
        assert await storage.get_channel_by_youtube_id(CHANNEL) is not None
        playlists = await storage.get_playlists(CHANNEL)
        assert [p.playlist_id for p in playlists] == [UPLOADS]
        assert len(await storage.get_playlist_items(UPLOADS)) == 1


class TestPlaylistSync:
    """Tests for syncing a channel's playlists."""

    @pytest.mark.asyncio
    async def test_playlists_and_items_stored(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that every playlist is stored with its items."""
        youtube.add_channel(
            CHANNEL,
            uploads=["vid_a", "vid_b", "vid_c"],
            playlists={"PL_one": ["vid_c", "vid_a"], "PL_two": ["vid_b"]},
        )

        await service.add_channel(CHANNEL)

        playlists = {p.playlist_id: p for p in await storage.get_playlists(CHANNEL)}
        assert set(playlists) == {UPLOADS, "PL_one", "PL_two"}
        assert playlists["PL_one"].title == "Playlist PL_one"
        assert playlists["PL_one"].item_count == 2

        items = await storage.get_playlist_items("PL_one")
        assert [(i.video_id, i.position) for i in items] == [("vid_c", 0), ("vid_a", 1)]
        # Videos are shared across playlists, never duplicated
        assert len(await storage.get_videos(CHANNEL)) == 3

    @pytest.mark.asyncio
    async def test_playlists_paginated(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that playlist listing follows page tokens."""
        playlists = {f"PL_{i:02d}": [] for i in range(5)}
        youtube.add_channel(CHANNEL, playlists=playlists, page_size=2)

        await service.add_channel(CHANNEL)

        assert youtube.count_calls("list_playlists") == 3
        assert len(await storage.get_playlists(CHANNEL)) == 6

    @pytest.mark.asyncio
    async def test_resync_skips_existing(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that a second sync only adds new playlists."""
        youtube.add_channel(CHANNEL, playlists={"PL_one": ["vid_a"]})
        await service.add_channel(CHANNEL)

        youtube.add_channel(CHANNEL, playlists={"PL_one": ["vid_a"], "PL_new": ["vid_b"]})
        async with storage.transaction():
            result = await service.sync_channel_playlists(CHANNEL)

        assert result.added == 1
        assert result.skipped == 1
        assert result.failed is False
        assert len(await storage.get_playlist_items("PL_one")) == 1
        assert len(await storage.get_playlist_items("PL_new")) == 1

    @pytest.mark.asyncio
    async def test_failing_playlist_keeps_row_and_continues(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that a playlist whose items fail is stored empty and sync continues."""
        youtube.add_channel(CHANNEL, playlists={"PL_bad": ["vid_a"], "PL_good": ["vid_b"]})
        youtube.failing_playlists.add("PL_bad")

        await service.add_channel(CHANNEL)

        assert await storage.get_playlist_by_youtube_id("PL_bad") is not None
        assert await storage.get_playlist_items("PL_bad") == []
        assert len(await storage.get_playlist_items("PL_good")) == 1


class TestVideoSync:
    """Tests for syncing a playlist's videos."""

    @pytest.mark.asyncio
    async def test_pagination_completeness(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that 130 items over 3 pages get positions 0..129."""
        video_ids = _video_ids("v", 130)
        youtube.add_channel(CHANNEL, uploads=video_ids)

        await service.add_channel(CHANNEL)

        items = await storage.get_playlist_items(UPLOADS)
        assert [i.position for i in items] == list(range(130))
        assert [i.video_id for i in items] == video_ids
        assert youtube.count_calls("list_playlist_items") == 3
        assert youtube.count_calls("get_videos") == 3
        assert len(await storage.get_videos(CHANNEL)) == 130

    @pytest.mark.asyncio
    async def test_missing_videos_skipped_with_dense_positions(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that videos without details are skipped and take no position."""
        youtube.add_channel(
            CHANNEL, uploads=["vid_a", "vid_private", "vid_b"], missing={"vid_private"}
        )
        await service.add_channel(CHANNEL)

        items = await storage.get_playlist_items(UPLOADS)
        assert [(i.video_id, i.position) for i in items] == [("vid_a", 0), ("vid_b", 1)]
        assert await storage.get_video_by_youtube_id("vid_private") is None

    @pytest.mark.asyncio
    async def test_sync_result_counts(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test the counters of a direct video sync."""
        youtube.add_channel(CHANNEL, uploads=["vid_a", "vid_gone", "vid_b"], missing={"vid_gone"})
        youtube.set_playlist_items("PL_dupes", ["vid_a", "vid_gone", "vid_b", "vid_a"])

        async with storage.transaction():
            result = await service.sync_playlist_videos("PL_dupes", CHANNEL)

        assert result.videos_added == 2
        assert result.items_added == 2
        assert result.duplicates == 1
        assert result.missing == 1
        assert result.failed is False

    @pytest.mark.asyncio
    async def test_duplicate_items_not_stored_twice(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that a repeated video yields one item and takes no position."""
        youtube.add_channel(CHANNEL, uploads=["vid_a", "vid_b", "vid_a", "vid_c"])

        await service.add_channel(CHANNEL)

        items = await storage.get_playlist_items(UPLOADS)
        assert [(i.video_id, i.position) for i in items] == [
            ("vid_a", 0),
            ("vid_b", 1),
            ("vid_c", 2),
        ]

    @pytest.mark.asyncio
    async def test_positions_dense_across_pages(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that skipped and repeated items leave no gaps across page boundaries."""
        youtube.add_channel(
            CHANNEL,
            uploads=["vid_a", "vid_gone", "vid_b", "vid_a", "vid_c"],
            missing={"vid_gone"},
            page_size=2,
        )

        await service.add_channel(CHANNEL)

        items = await storage.get_playlist_items(UPLOADS)
        assert [(i.video_id, i.position) for i in items] == [
            ("vid_a", 0),
            ("vid_b", 1),
            ("vid_c", 2),
        ]

    @pytest.mark.asyncio
    async def test_resync_is_deduplicated(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that syncing the same playlist twice adds nothing."""
        youtube.add_channel(CHANNEL, uploads=["vid_a", "vid_b"])
        await service.add_channel(CHANNEL)

        async with storage.transaction():
            result = await service.sync_playlist_videos(UPLOADS, CHANNEL)

        assert result.items_added == 0
        assert result.videos_added == 0
        assert result.duplicates == 2
        assert len(await storage.get_playlist_items(UPLOADS)) == 2

    @pytest.mark.asyncio
    async def test_failure_rolls_back_this_sync(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that a failure on a later page rolls back the whole call."""
        youtube.add_channel(CHANNEL, uploads=_video_ids("v", 5), page_size=2)
        youtube.failing_later_pages.add(UPLOADS)

        channel, created = await service.add_channel(CHANNEL)

        assert created is True
        assert await storage.get_playlist_items(UPLOADS) == []
        assert await storage.get_videos(CHANNEL) == []
        assert await storage.get_playlist_by_youtube_id(UPLOADS) is not None


class TestConcurrentOnboarding:
    """Tests for onboardings sharing one in-memory store."""

    @pytest.mark.asyncio
    async def test_failed_sync_keeps_concurrent_onboarding(
        self, memory_storage: MemoryStorage, youtube: FakeYouTubeClient
    ):
        """Test that one channel's rolled-back sync leaves another channel's rows intact."""
        youtube.add_channel("UC_fail", uploads=_video_ids("f", 4), page_size=2)
        youtube.add_channel("UC_ok", uploads=_video_ids("k", 4), page_size=2)
        youtube.failing_later_pages.add("UU_fail")
        youtube.delay = 0.01
        service = ChannelIngestionService(memory_storage, youtube)

        results = await asyncio.gather(
            service.add_channel("UC_fail"),
            service.add_channel("UC_ok"),
        )

        assert [created for _, created in results] == [True, True]
        channels = await memory_storage.get_channels()
        assert sorted(c.channel_id for c in channels) == ["UC_fail", "UC_ok"]

        ok_items = await memory_storage.get_playlist_items("UU_ok")
        assert [i.video_id for i in ok_items] == _video_ids("k", 4)
        assert [i.position for i in ok_items] == [0, 1, 2, 3]
        assert len(await memory_storage.get_videos("UC_ok")) == 4

        assert await memory_storage.get_playlist_items("UU_fail") == []
        assert await memory_storage.get_videos("UC_fail") == []
        assert await memory_storage.get_playlist_by_youtube_id("UU_fail") is not None


class TestDeleteChannel:
    """Tests for cascading channel deletion."""

    @pytest.mark.asyncio
    async def test_delete_cascades(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that deleting a channel removes its playlists, items and videos."""
        youtube.add_channel(CHANNEL, uploads=["vid_a", "vid_b"], playlists={"PL_one": ["vid_a"]})
        channel, _ = await service.add_channel(CHANNEL)
        channel_pk = channel.id

        assert await service.delete_channel(channel_pk) is True

        assert await storage.get_channel(channel_pk) is None
        assert await storage.get_playlists(CHANNEL) == []
        assert await storage.get_playlist_items(UPLOADS) == []
        assert await storage.get_playlist_items("PL_one") == []
        assert await storage.get_videos(CHANNEL) == []

    @pytest.mark.asyncio
    async def test_delete_two_playlists_six_videos(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test the cascade over two playlists of 5 and 3 items sharing 6 distinct videos."""
        uploads = _video_ids("v", 5)
        extra = ["v003", "v004", "v005"]
        youtube.add_channel(CHANNEL, uploads=uploads, playlists={"PL_extra": extra})
        youtube.add_channel("UC_other", uploads=["vid_other"])
        channel, _ = await service.add_channel(CHANNEL)
        await service.add_channel("UC_other")
        channel_pk = channel.id

        playlists = await storage.get_playlists(CHANNEL)
        assert sorted(p.playlist_id for p in playlists) == ["PL_extra", UPLOADS]
        assert len(await storage.get_playlist_items(UPLOADS)) == 5
        assert len(await storage.get_playlist_items("PL_extra")) == 3
        assert len(await storage.get_videos(CHANNEL)) == 6

        assert await service.delete_channel(channel_pk) is True

        assert await storage.get_channel(channel_pk) is None
        assert await storage.get_playlists(CHANNEL) == []
        assert await storage.get_playlist_items(UPLOADS) == []
        assert await storage.get_playlist_items("PL_extra") == []
        assert await storage.get_videos(CHANNEL) == []
        for video_id in _video_ids("v", 6):
            assert await storage.get_video_by_youtube_id(video_id) is None

        assert await storage.get_channel_by_youtube_id("UC_other") is not None
        assert [i.video_id for i in await storage.get_playlist_items("UU_other")] == ["vid_other"]

    @pytest.mark.asyncio
    async def test_delete_keeps_other_channels(
        self, service: ChannelIngestionService, storage: Storage, youtube: FakeYouTubeClient
    ):
        """Test that another channel's rows survive, including shared videos."""
        youtube.add_channel(CHANNEL, uploads=["vid_a", "vid_shared"])
        youtube.add_channel("UC_other", playlists={"PL_mix": ["vid_shared", "vid_x"]})
        first, _ = await service.add_channel(CHANNEL)
        await service.add_channel("UC_other")

        assert await service.delete_channel(first.id) is True

        assert await storage.get_channel_by_youtube_id("UC_other") is not None
        items = await storage.get_playlist_items("PL_mix")
        assert [i.video_id for i in items] == ["vid_shared", "vid_x"]
        # Still placed in another channel's playlist
        assert await storage.get_video_by_youtube_id("vid_shared") is not None
        assert await storage.get_video_by_youtube_id("vid_a") is None

    @pytest.mark.asyncio
    async def test_delete_unknown_channel(self, service: ChannelIngestionService):
        """Test that deleting an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.delete_channel(999)

    @pytest.mark.asyncio
    async def test_delete_failure_rolls_back(
        self,
        service: ChannelIngestionService,
        storage: Storage,
        youtube: FakeYouTubeClient,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test that a failing step returns False and leaves everything in place."""
        youtube.add_channel(CHANNEL, uploads=["vid_a"])
        channel, _ = await service.add_channel(CHANNEL)
        channel_pk = channel.id

        async def broken_delete_videos(channel_id: str) -> int:
            raise RuntimeError("disk full")

        monkeypatch.setattr(storage, "delete_videos", broken_delete_videos)

        assert await service.delete_channel(channel_pk) is False

        assert await storage.get_channel(channel_pk) is not None
        assert await storage.get_playlist_by_youtube_id(UPLOADS) is not None
        assert len(await storage.get_playlist_items(UPLOADS)) == 1
