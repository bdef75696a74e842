"""
In-memory caching.

Exports:
- TTLCache: bounded store with per-entry expiry and a scheduled sweep
- CacheConfig / CacheStats / CacheEntry: supporting data structures
- Key helpers for composite cache keys
"""

from .ttl_cache import (
    TTLCache,
    CacheConfig,
    CacheEntry,
    CacheStats,
    is_expired,
)
from .keys import (
    make_cache_key,
    is_valid_cache_key,
    serialize_params,
)

__all__ = [
    "TTLCache",
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "is_expired",
    "make_cache_key",
    "is_valid_cache_key",
    "serialize_params",
]
