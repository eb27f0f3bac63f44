"""Python client for the BitTorrent Sync HTTP control API."""

from __future__ import annotations

from typing import Any

from btsync._version import __version__
from btsync.api import BitTorrentSyncAPI
from btsync.config import ClientConfig, ClientSettings, generate_config, get_settings
from btsync.errors import BitTorrentSyncError, ConfigError, FormatError, RequestError
from btsync.tracing import Tracer

__all__ = [
    "BitTorrentSyncAPI",
    "BitTorrentSyncError",
    "ClientConfig",
    "ClientSettings",
    "ConfigError",
    "FormatError",
    "RequestError",
    "__version__",
    "connect",
    "generate_config",
]


def connect(config: Any = None, *, tracer: Tracer | None = None) -> BitTorrentSyncAPI:
    """Return a client for ``config``, or for the ``BTSYNC_*`` environment when omitted."""
    if config is None:
        config = get_settings().to_source()
    return BitTorrentSyncAPI(config, tracer=tracer)
