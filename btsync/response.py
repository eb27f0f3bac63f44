"""Decoding and error classification of daemon responses.

The daemon answers either with a JSON array of objects or a single JSON
object. Elements carrying a positive ``error`` field are failures; a single
object is also a failure when its ``result`` field is above 200. Both fields
are coerced loosely to integers, so non-numeric values count as 0.
"""

from __future__ import annotations

import json
import re
import sys
from typing import Any

from btsync.errors import FormatError

__all__ = ["ErrorSet", "coerce_int", "is_error_entry", "parse_response"]

ErrorSet = dict[str, Any] | list[dict[str, Any]]

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def coerce_int(value: Any) -> int:
    """Convert ``value`` to an int, falling back to 0 for anything non-numeric."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        return int(match.group(1)) if match else 0
    return 0


def is_error_entry(entry: Any) -> bool:
    """Return True when a list element reports a failure."""
    return isinstance(entry, dict) and coerce_int(entry.get("error")) > 0


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _intern_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    return {sys.intern(key): value for key, value in pairs}


def parse_response(body: bytes | str) -> tuple[Any, ErrorSet]:
    """Decode ``body`` and classify it.

    Returns the decoded value untouched together with the error set: ``{}``
    for a successful object, the filtered failing elements for a list, or the
    whole object when it reports a failure.

    Raises:
        FormatError: When the body is empty or not valid JSON.
    """
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        if not text.strip():
            raise FormatError("Empty response body.")
        data = json.loads(
            text,
            object_pairs_hook=_intern_keys,
            parse_constant=_reject_constant,
        )
    except ValueError as exc:
        raise FormatError(f"Invalid JSON response: {exc}") from exc

    errors: ErrorSet = {}
    if isinstance(data, list):
        errors = [entry for entry in data if is_error_entry(entry)]
    elif isinstance(data, dict):
        if coerce_int(data.get("error")) > 0 or coerce_int(data.get("result")) > 200:
            errors = data
    return data, errors
