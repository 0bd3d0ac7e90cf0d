"""Unique names for the entities created in a Salesforce organization."""

from __future__ import annotations

import secrets

NAME_PREFIX = "SW"
MAX_NAME_LENGTH = 40


def generate_name(kind: str) -> str:
    """Return ``SW_<kind>_<hex>``, never longer than ``MAX_NAME_LENGTH``.

    Salesforce rejects duplicate class, trigger and remote site names, so
    every call draws a fresh random suffix. The suffix is hex encoded (two
    characters per byte) and sized to fill the remaining length.
    """
    prefix = f"{NAME_PREFIX}_{kind}_"
    suffix_bytes = max(0, MAX_NAME_LENGTH - len(prefix)) // 2
    return f"{prefix}{secrets.token_hex(suffix_bytes)}"
