"""Shapes of the JSON objects returned by the daemon.

These are annotations only: the client hands back the decoded JSON as is, and
the daemon may add fields that are not listed here.
"""

from __future__ import annotations

from typing import Any, TypedDict

__all__ = ["FileEntry", "Folder", "Peer", "Secrets"]


class Folder(TypedDict, total=False):
    dir: str
    secret: str
    size: int
    type: str
    files: int
    error: int
    indexing: Any


class Peer(TypedDict, total=False):
    id: str
    connection: str  # "direct" or "relay"
    name: str
    synced: int  # timestamp of the last completed sync
    download: int
    upload: int


class FileEntry(TypedDict, total=False):
    name: str
    size: int
    state: str
    have_pieces: int
    total_pieces: int
    type: str
    download: int  # selective sync folders only


class Secrets(TypedDict, total=False):
    read_only: str
    read_write: str
    encryption: str
