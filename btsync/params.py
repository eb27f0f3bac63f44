"""Allowlists for option mappings forwarded to the daemon."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

__all__ = [
    "ADD_FOLDER_PARAMS",
    "FOLDER_PREFS_PARAMS",
    "GLOBAL_PREFS_PARAMS",
    "keep_only",
]

ADD_FOLDER_PARAMS: frozenset[str] = frozenset({"selective", "secret"})

FOLDER_PREFS_PARAMS: frozenset[str] = frozenset(
    {
        "search_lan",
        "use_dht",
        "use_hosts",
        "use_relay_server",
        "use_sync_trash",
        "use_tracker",
    }
)

GLOBAL_PREFS_PARAMS: frozenset[str] = frozenset(
    {
        "device_name",
        "disk_low_priority",
        "download_limit",
        "folder_rescan_interval",
        "lan_encrypt_data",
        "lan_use_tcp",
        "lang",
        "listening_port",
        "max_file_size_diff_for_patching",
        "max_file_size_for_versioning",
        "rate_limit_local_peers",
        "send_buf_size",
        "sync_max_time_diff",
        "sync_trash_ttl",
        "upload_limit",
        "use_upnp",
        "recv_buf_size",
    }
)


def keep_only(params: Mapping[str, Any] | None, allowed: Iterable[str]) -> dict[str, Any]:
    """Return a copy of ``params`` restricted to the keys in ``allowed``.

    Keys are compared by their string form, so enum members or other objects
    whose ``str()`` matches an allowed name survive the filter.
    """
    if isinstance(allowed, str):
        raise TypeError("allowed must be a collection of names, not a string.")
    names = frozenset(str(name) for name in allowed)
    return {str(key): value for key, value in (params or {}).items() if str(key) in names}
