"""Utility modules for the Tubeshelf application."""

from src.utils.formatting import format_duration, format_subscriber_count, format_view_count
from src.utils.logging import LogContext, get_logger, setup_logging
from src.utils.rate_limiter import RateLimitConfig, rate_limiter

__all__ = [
    # Formatting
    "format_duration",
    "format_subscriber_count",
    "format_view_count",
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Rate limiting
    "rate_limiter",
    "RateLimitConfig",
]
