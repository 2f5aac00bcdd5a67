"""Display formatting for YouTube counts and durations.

All helpers accept the raw provider strings (which may be missing) and
never raise: absent or malformed input falls back to a zero value.
"""

import re

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _parse_count(count: str | int | None) -> int | None:
    """Parse the leading integer of a count, like JavaScript's parseInt."""
    if count is None or count == "":
        return None
    match = _LEADING_INT_RE.match(str(count))
    if not match:
        return None
    return int(match.group(1))


def _abbreviate(num: int, unit: str) -> str:
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M {unit}"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K {unit}"
    return f"{num} {unit}"


def format_duration(iso_duration: str | None) -> str:
    """Format an ISO 8601 duration: PT1H2M3S -> 1:02:03, PT4M5S -> 4:05."""
    if not iso_duration:
        return "0:00"

    match = _DURATION_RE.search(iso_duration)
    if not match:
        return "0:00"

    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_view_count(count: str | int | None) -> str:
    """Format a view count: 1234567 -> "1.2M views"."""
    num = _parse_count(count)
    if num is None:
        return "0 views"
    return _abbreviate(num, "views")


def format_subscriber_count(count: str | int | None) -> str:
    """Format a subscriber count: 1500 -> "1.5K subscribers"."""
    num = _parse_count(count)
    if num is None:
        return "0 subscribers"
    return _abbreviate(num, "subscribers")
