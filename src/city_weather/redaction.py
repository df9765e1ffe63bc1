"""Helpers for redacting the provider credential from logs and error text."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

_SENSITIVE_KEY_RE = re.compile(
    r"(appid|api[_-]?key|token|secret|authorization)",
    re.IGNORECASE,
)
# OpenWeatherMap carries the key as a query parameter, so it shows up inside
# request URLs echoed by httpx exceptions.
_QUERY_PARAM_SECRET_RE = re.compile(
    r"(?i)([?&](?:appid|api[_-]?key|token)=)[^&\s'\"]+",
)
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (
      appid|
      api[_-]?key|
      token|
      secret|
      authorization
    )
    \s*[:=]\s*
    ([^\s,;&'"]+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact credentials embedded in plain text."""
    sanitized = _QUERY_PARAM_SECRET_RE.sub(r"\1" + REDACTED, text)
    sanitized = _KEY_VALUE_SECRET_RE.sub(
        lambda m: m.group(0) if REDACTED in m.group(2) else f"{m.group(1)}={REDACTED}",
        sanitized,
    )
    return sanitized


def sanitize_for_logging(value: Any) -> Any:
    """Recursively redact sensitive values in nested structures."""
    if isinstance(value, dict):
        sanitized: dict[Any, Any] = {}
        for key, child in value.items():
            if _SENSITIVE_KEY_RE.search(str(key)):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_for_logging(child)
        return sanitized
    if isinstance(value, list):
        return [sanitize_for_logging(item) for item in value]
    if isinstance(value, tuple):
        return tuple(sanitize_for_logging(item) for item in value)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
