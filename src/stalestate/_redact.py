"""Helpers for logging opaque readings.

Readings are application data: they can be large and may carry credentials
when they come straight from an HTTP response. Debug logs go through
:func:`redact_reading` so neither ends up in a log file verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "authorization",
        "cookie",
        "setcookie",
    }
)

_MAX_ITEMS = 20


def _normalize_key(key: str) -> str:
    return key.lower().replace("_", "").replace("-", "")


def redact_reading(value: Any, *, max_string: int = 200, _depth: int = 0) -> Any:
    """Return a log-safe copy of *value*."""
    if _depth > 8:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for index, (k, v) in enumerate(value.items()):
            if index >= _MAX_ITEMS:
                redacted["…"] = f"<{len(value) - _MAX_ITEMS} more>"
                break
            key = str(k)
            if _normalize_key(key) in _SECRET_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_reading(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        items = [redact_reading(v, max_string=max_string, _depth=_depth + 1) for v in value[:_MAX_ITEMS]]
        if len(value) > _MAX_ITEMS:
            items.append(f"<{len(value) - _MAX_ITEMS} more>")
        return items

    text = repr(value)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text
