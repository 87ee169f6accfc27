# =============================================================================
# lib/naming.py - Key Naming Normalizer
# =============================================================================
# The admin frontend, the JSON request bodies and the Postgres columns don't
# agree on naming: callers send camelCase, snake_case or a mix, while columns
# are camelCase (homeId, orgUrl) or flattened lowercase (courseurl).
#
# This module converts keys between those conventions and matches a payload
# against a column name regardless of how the caller spelled it.
#
# Everything here is pure: no I/O, no logging, never raises on odd input.
#
# Usage:
#   from lib.naming import pick_fields
#   insert = pick_fields({"org_url": "https://x"}, ["name", "orgUrl"])
#   # {"orgUrl": "https://x"}
# =============================================================================

from __future__ import annotations

import re
from typing import Any, Iterable


_UPPER_RE = re.compile(r"[A-Z]")


def camel_to_snake(key: str) -> str:
    """
    Convert a camelCase key to snake_case.

    Inserts "_" before every uppercase letter and lowercases it, so
    "orgPortfolioUrl" -> "org_portfolio_url" and "gpa" stays "gpa".
    """
    return _UPPER_RE.sub(lambda m: "_" + m.group(0).lower(), key)


def flatten_key(key: str) -> str:
    """Strip underscores and lowercase: "org_url" and "orgUrl" both -> "orgurl"."""
    return key.replace("_", "").lower()


def to_snake_keys(obj: Any) -> Any:
    """
    Recursively copy obj with every dict key converted to snake_case.

    Lists are traversed, primitives returned unchanged, input never mutated.
    """
    if isinstance(obj, list):
        return [to_snake_keys(item) for item in obj]
    if isinstance(obj, dict):
        return {
            (camel_to_snake(k) if isinstance(k, str) else k): to_snake_keys(v)
            for k, v in obj.items()
        }
    return obj


def to_flat_keys(obj: Any) -> Any:
    """Recursively copy obj with every dict key flattened (see flatten_key)."""
    if isinstance(obj, list):
        return [to_flat_keys(item) for item in obj]
    if isinstance(obj, dict):
        return {
            (flatten_key(k) if isinstance(k, str) else k): to_flat_keys(v)
            for k, v in obj.items()
        }
    return obj


def match_field(payload: dict[str, Any], field: str) -> tuple[bool, Any]:
    """
    Find the value for a column name in a payload.

    Tries the exact key first, then the first key whose flattened form equals
    the flattened column name.

    Returns:
        (found, value) - found is False when no key matches; a key present
        with a None value counts as found.
    """
    if field in payload:
        return True, payload[field]

    target = flatten_key(field)
    for key, value in payload.items():
        if isinstance(key, str) and flatten_key(key) == target:
            return True, value

    return False, None


def pick_fields(payload: dict[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """
    Build a write dict holding only whitelisted columns.

    The raw payload is matched first (so an exact camelCase key wins), then
    its snake_case copy. Keys that match no allowed column are dropped, and
    allowed columns missing from the payload are simply left out.

    Example:
        pick_fields({"orgURL": "a", "junk": 1}, ["orgUrl"])  # {"orgUrl": "a"}
    """
    snake_payload = to_snake_keys(payload)
    result: dict[str, Any] = {}

    for field in allowed:
        found, value = match_field(payload, field)
        if not found:
            found, value = match_field(snake_payload, field)
        if found:
            result[field] = value

    return result
