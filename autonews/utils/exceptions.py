"""
Exception types for autonews.

Lower layers (HTTP client, API client, decoders) raise these; the feed
store, image prefetcher and views catch them, log, and carry on.
"""
from typing import Optional


class AutonewsError(Exception):
    """Base exception for all autonews errors."""
    pass


class NetworkError(AutonewsError):
    """Raised when a request fails, times out or returns a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class DecodeError(AutonewsError):
    """Raised when a response body does not match the expected JSON or image format."""
    pass


class InvalidURLError(AutonewsError):
    """Raised when a URL string cannot be used for a request."""
    pass
