"""Exception types raised by the Sync API client.

Business-level failures reported by the daemon are not raised; they are
stored on the client and exposed through ``has_errors()``/``is_successful()``.
"""

from __future__ import annotations

__all__ = ["BitTorrentSyncError", "ConfigError", "FormatError", "RequestError"]


class BitTorrentSyncError(RuntimeError):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = str(message)


class ConfigError(BitTorrentSyncError):
    """Raised when the client configuration is missing or malformed."""


class RequestError(BitTorrentSyncError):
    """Raised when the daemon answers with a non-200 status or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = int(status_code) if status_code is not None else None
        self.body = body


class FormatError(BitTorrentSyncError):
    """Raised when a response body is not valid JSON."""
