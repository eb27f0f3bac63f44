"""Wire tracing for the API client.

A tracer is any callable taking one line of text. It is attached to the
underlying httpx client as request/response event hooks.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
from rich.console import Console

__all__ = ["Tracer", "console_tracer", "tracing_hooks"]

Tracer = Callable[[str], None]

_SEPARATOR = "-" * 70
_REDACTED_HEADERS = frozenset({"authorization"})


def _format_headers(headers: httpx.Headers) -> list[str]:
    lines = []
    for key, value in headers.items():
        shown = "<redacted>" if key.lower() in _REDACTED_HEADERS else value
        lines.append(f"{key}: {shown}")
    return lines


def tracing_hooks(tracer: Tracer) -> dict[str, list[Callable[..., None]]]:
    """Return httpx ``event_hooks`` that feed request/response lines to ``tracer``."""

    def on_request(request: httpx.Request) -> None:
        tracer(_SEPARATOR)
        tracer(f"-> {request.method} {request.url}")
        for line in _format_headers(request.headers):
            tracer(f"-> {line}")

    def on_response(response: httpx.Response) -> None:
        tracer(f"<- {response.http_version} {response.status_code} {response.reason_phrase}")
        for line in _format_headers(response.headers):
            tracer(f"<- {line}")

    return {"request": [on_request], "response": [on_response]}


def console_tracer(console: Console | None = None) -> Tracer:
    """Return a tracer printing to stderr through a rich console."""
    target = console or Console(stderr=True, highlight=False)

    def trace(line: str) -> None:
        target.print(line, markup=False)

    return trace
