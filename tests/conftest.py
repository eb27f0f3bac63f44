from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from btsync.api import BitTorrentSyncAPI


class FakeDaemon:
    """Records every request and answers with queued (status, body) pairs."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._replies: list[tuple[int, bytes]] = []

    def reply(self, payload: Any, *, status: int = 200) -> None:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        self._replies.append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self._replies.pop(0) if self._replies else (200, b"{}")
        return httpx.Response(status, content=body, request=request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_params(self) -> dict[str, str]:
        return dict(self.last.url.params)


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest.fixture
def make_client(daemon: FakeDaemon) -> Callable[..., BitTorrentSyncAPI]:
    def factory(config: Any = None, **kwargs: Any) -> BitTorrentSyncAPI:
        if config is None:
            config = {"host": "sync.local:8888", "login": "api", "password": "secret"}
        return BitTorrentSyncAPI(config, transport=httpx.MockTransport(daemon.handler), **kwargs)

    return factory


@pytest.fixture
def client(make_client: Callable[..., BitTorrentSyncAPI]) -> BitTorrentSyncAPI:
    return make_client()
