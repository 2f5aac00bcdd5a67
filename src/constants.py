"""Application constants - centralized configuration values."""

# =============================================================================
# YouTube Data API
# =============================================================================
YOUTUBE_PAGE_SIZE = 50  # maxResults cap for list endpoints and id batches
YOUTUBE_CHANNEL_PARTS = "snippet,statistics,contentDetails"
YOUTUBE_PLAYLIST_PARTS = "snippet,contentDetails"
YOUTUBE_PLAYLIST_ITEM_PARTS = "snippet,contentDetails"
YOUTUBE_VIDEO_PARTS = "snippet,contentDetails,statistics"
YOUTUBE_HOST = "youtube.com"

# =============================================================================
# Ingestion
# =============================================================================
UPLOADS_PLAYLIST_TITLE = "Uploads"
UPLOADS_PLAYLIST_DESCRIPTION = "All videos uploaded to this channel"
THUMBNAIL_PREFERENCE = ("high", "default")

# =============================================================================
# Search
# =============================================================================
SEARCH_TYPES = ("all", "video", "playlist")
SEARCH_MAX_RESULTS = 50

# =============================================================================
# Cache TTLs (in seconds)
# =============================================================================
CACHE_TTL_SEARCH = 15 * 60  # 15 minutes

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
API_TIMEOUT_EXTERNAL = 15.0

# =============================================================================
# Rate limiting
# =============================================================================
YOUTUBE_REQUESTS_PER_SECOND = 5.0
YOUTUBE_BURST_SIZE = 10
