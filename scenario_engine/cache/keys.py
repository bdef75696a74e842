"""Helpers for building and checking cache keys."""
import json
from typing import Any, Mapping

MAX_KEY_LENGTH = 250


def make_cache_key(prefix: str, *parts: str) -> str:
    """Join a prefix and parts with colons, e.g. scenario:{slug}:{locale}."""
    return ":".join([prefix, *parts])


def is_valid_cache_key(key: Any) -> bool:
    return isinstance(key, str) and 0 < len(key) < MAX_KEY_LENGTH


def serialize_params(params: Mapping[str, Any]) -> str:
    """Stable JSON for a parameter mapping, independent of key order."""
    return json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
