"""HTTP transport for the Sync control API, built on top of httpx.

Every call opens a short-lived `httpx.Client`, sends a single GET and closes
the connection again. Status and transport failures are mapped into
`RequestError` so callers only deal with this package's exceptions.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
from loguru import logger

from btsync.errors import RequestError

__all__ = ["HttpClient", "build_api_path"]

log = logger.bind(module="btsync.net.http")

_MAX_ERROR_TEXT_CHARS = 2048

EventHook = Callable[..., Any]


def build_api_path(method: str, params: Mapping[str, Any] | None = None) -> str:
    """Return ``/api?method=<method>`` with form-encoded ``params`` appended.

    Booleans are sent as 1/0, the form the daemon uses for its switches.
    """
    path = f"/api?method={method}"
    if params:
        encoded = {
            key: int(value) if isinstance(value, bool) else value
            for key, value in params.items()
        }
        path += "&" + urlencode(encoded)
    return path


def _truncate(text: str, *, limit: int) -> str:
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    head = text[: max(0, limit - 3)].rstrip()
    return f"{head}..."


def _safe_response_text(response: httpx.Response) -> str:
    """Best-effort extraction of response text for error messages."""
    try:
        text = response.text or ""
    except Exception:
        try:
            text = response.content.decode("utf-8", errors="replace")
        except Exception:
            text = ""
    return _truncate(text, limit=_MAX_ERROR_TEXT_CHARS)


class HttpClient:
    """Blocking GET client with fixed headers and error mapping.

    Notes:
        - No timeout is configured here; httpx defaults apply.
        - `transport` lets tests plug in an `httpx.MockTransport`.
        - `event_hooks` are handed to every `httpx.Client` (used for tracing).
    """

    def __init__(
        self,
        *,
        base_url: str,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        event_hooks: Mapping[str, list[EventHook]] | None = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.headers: dict[str, str] = dict(headers or {})
        self.transport = transport
        self.event_hooks = {key: list(hooks) for key, hooks in (event_hooks or {}).items()}

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "base_url": self.base_url,
            "headers": self.headers,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        if self.event_hooks:
            kwargs["event_hooks"] = self.event_hooks
        return httpx.Client(**kwargs)  # type: ignore[arg-type]

    def get(self, path: str) -> httpx.Response:
        """GET ``path`` and return the response when its status is 200.

        Raises:
            RequestError: On any status other than 200, or when the request
                cannot be sent.
        """
        target = (path or "").strip()
        if not target:
            raise ValueError("path must be non-empty.")

        try:
            with self._build_client() as client:
                response = client.get(target)
                response.read()
        except httpx.HTTPError as exc:
            raise RequestError(f"HTTP request failed: {exc}") from exc

        if response.status_code != 200:
            body = _safe_response_text(response)
            message = f"{response.status_code} {response.reason_phrase}"
            if body:
                message += f": {body}"
            log.debug("Request {} failed with status {}", target, response.status_code)
            raise RequestError(message, status_code=response.status_code, body=body)
        return response
