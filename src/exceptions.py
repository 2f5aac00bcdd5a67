"""Application exceptions.

Each exception carries the HTTP status it is rendered with by the
handlers registered in src.main.
"""


class TubeshelfError(Exception):
    """Base exception for application errors."""

    status_code = 500

    def __init__(self, message: str, errors: list | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors


class InvalidRequestError(TubeshelfError):
    """Request input failed validation."""

    status_code = 400


class InvalidReferenceError(InvalidRequestError):
    """A channel reference could not be parsed."""


class NotFoundError(TubeshelfError):
    """A channel, playlist or video reference does not resolve."""

    status_code = 404


class UpstreamError(TubeshelfError):
    """A YouTube Data API call failed."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class StoreError(TubeshelfError):
    """A persistence operation failed."""

    status_code = 500
