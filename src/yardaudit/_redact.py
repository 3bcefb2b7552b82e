"""Redaction for DEBUG logs.

Request headers carry the location API token, the config carries the
Gemini key and AI requests carry the uploaded document.  Everything
logged from those goes through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "token",
        "api_token",
        "apitoken",
        "api_key",
        "apikey",
        "location_token",
        "gemini_api_key",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* that is safe to log.

    Values under secret keys are masked at any depth, ``bytes`` (document
    payloads) are replaced by their size and long strings are cut to
    *max_string* characters.
    """
    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>" if str(key).lower() in _SECRET_KEYS else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}...<truncated>"
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return repr(value)
