"""Tests for the metrics registry helpers."""

from src.utils.metrics import Counter, Histogram, MetricsRegistry, normalize_path


class TestNormalizePath:
    """Tests for path normalization."""

    def test_numeric_ids(self):
        assert normalize_path("/api/channels/42") == "/api/channels/:id"

    def test_youtube_ids(self):
        """Test that channel and playlist ids are collapsed."""
        assert (
            normalize_path("/api/channels/UC_x5XG1OV2P6uZZ5FSM9Ttw/videos")
            == "/api/channels/:external_id/videos"
        )
        assert normalize_path("/api/playlists/PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf") == (
            "/api/playlists/:external_id"
        )

    def test_plain_paths_unchanged(self):
        assert normalize_path("/api/youtube/search") == "/api/youtube/search"
        assert normalize_path("/api/watch-later") == "/api/watch-later"

    def test_watch_later_video_id(self):
        assert normalize_path("/api/watch-later/dQw4w9WgXcQ") == "/api/watch-later/:external_id"


class TestRegistry:
    """Tests for counters and exposition."""

    def test_counter_labels(self):
        counter = Counter(name="c", help="help", labels=("outcome",))
        counter.inc(outcome="ok")
        counter.inc(2, outcome="ok")
        counter.inc(outcome="failed")

        assert counter.get(outcome="ok") == 3
        assert counter.get(outcome="failed") == 1

    def test_histogram_buckets(self):
        histogram = Histogram(name="h", help="help", buckets=(0.1, 1.0))
        histogram.observe(0.05)
        histogram.observe(0.5)

        assert histogram._totals[()] == 2
        assert histogram._counts[()][0.1] == 1
        assert histogram._counts[()][1.0] == 2

    def test_format_prometheus(self):
        registry = MetricsRegistry()
        registry.playlists_synced_total.inc(outcome="ok")
        registry.youtube_api_duration_seconds.observe(0.2, endpoint="videos")

        text = registry.format_prometheus()

        assert 'playlists_synced_total{outcome="ok"} 1.0' in text
        assert 'youtube_api_duration_seconds_count{endpoint="videos"} 1' in text
        assert "channels_onboarded_total" in text
