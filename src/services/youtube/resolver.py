"""Resolve user-supplied channel references to YouTube channel ids.

Accepted forms:
    UC_x5XG1OV2P6uZZ5FSM9Ttw                               (bare id)
    https://www.youtube.com/channel/UC_x5XG1OV2P6uZZ5FSM9Ttw
    https://www.youtube.com/c/GoogleDevelopers              (custom URL)
    https://www.youtube.com/@GoogleDevelopers               (handle)
"""

import logging
import re
from urllib.parse import unquote

from src.constants import YOUTUBE_HOST
from src.exceptions import InvalidReferenceError, NotFoundError
from src.services.youtube.client import YouTubeClient

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_CHANNEL_PATH_RE = re.compile(r"/channel/([^/?#]+)")
_HANDLE_PATH_RE = re.compile(r"/(?:c/|@)([^/?#]+)")


def is_url(reference: str) -> bool:
    """Whether a reference is a URL rather than a literal channel id."""
    return YOUTUBE_HOST in reference.lower() or bool(_SCHEME_RE.match(reference))


def extract_channel_id(url: str) -> str | None:
    """Extract the id from a /channel/<id> URL."""
    match = _CHANNEL_PATH_RE.search(url)
    return match.group(1) if match else None


def extract_handle(url: str) -> str | None:
    """Extract the name from a /c/<name> or /@<handle> URL."""
    match = _HANDLE_PATH_RE.search(url)
    return unquote(match.group(1)) if match else None


async def resolve_channel_reference(reference: str, client: YouTubeClient) -> str:
    """Turn a channel id or channel URL into a canonical channel id.

    Custom URLs and handles cost one search call (type=channel); the first
    hit wins.

    Raises:
        InvalidReferenceError: Empty reference, or a URL with no id or handle
        NotFoundError: The handle search returned nothing
        UpstreamError: The search call failed
    """
    reference = reference.strip()
    if not reference:
        raise InvalidReferenceError("Channel URL is required")

    if not is_url(reference):
        return reference

    channel_id = extract_channel_id(reference)
    if channel_id:
        return channel_id

    handle = extract_handle(reference)
    if not handle:
        raise InvalidReferenceError(f"Unsupported channel URL: {reference}")

    results = await client.search(handle, type="channel", part="snippet")
    if not results:
        logger.info(f"No channel found for handle {handle!r}")
        raise NotFoundError("Channel not found")

    resolved = results[0].get("id", {}).get("channelId")
    if not resolved:
        raise NotFoundError("Channel not found")

    logger.debug(f"Resolved handle {handle!r} to {resolved}")
    return resolved
