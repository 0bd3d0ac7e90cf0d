"""Sensitive-field masking for log lines and error diagnostics.

``redact_sensitive_fields`` replaces values whose keys look like credentials;
``redact_session_id`` scrubs the session id out of rendered SOAP envelopes.
"""

from __future__ import annotations

import re

_MAX_REDACT_DEPTH = 20

# Substring match, case-insensitive.
SENSITIVE_KEY_MARKERS: list[str] = [
    "password",
    "secret",
    "token",
    "sessionid",
    "credential",
    "authorization",
]

_SESSION_ID_PATTERN = re.compile(
    r"(<(?:[\w-]+:)?sessionId>)(.*?)(</(?:[\w-]+:)?sessionId>)",
    re.DOTALL,
)


def redact_sensitive_fields(
    value: object,
    *,
    mask: str = "***",
    depth: int = 0,
    max_depth: int = _MAX_REDACT_DEPTH,
) -> object:
    """Recursively replace sensitive values in dicts/lists.

    Keys are matched by *substring* against ``SENSITIVE_KEY_MARKERS``
    (case-insensitive).  When ``max_depth`` is exceeded the entire
    sub-tree is replaced with *mask*.
    """
    if depth >= max_depth:
        return mask
    if isinstance(value, dict):
        redacted: dict[str, object] = {}
        for key, val in value.items():
            if any(marker in str(key).lower() for marker in SENSITIVE_KEY_MARKERS):
                redacted[key] = mask
            else:
                redacted[key] = redact_sensitive_fields(
                    val, mask=mask, depth=depth + 1, max_depth=max_depth,
                )
        return redacted
    if isinstance(value, (list, tuple)):
        return [
            redact_sensitive_fields(
                item, mask=mask, depth=depth + 1, max_depth=max_depth,
            )
            for item in value
        ]
    if isinstance(value, str):
        return redact_session_id(value, mask=mask)
    return value


def redact_session_id(text: str, *, mask: str = "***") -> str:
    return _SESSION_ID_PATTERN.sub(lambda m: f"{m.group(1)}{mask}{m.group(3)}", text)
