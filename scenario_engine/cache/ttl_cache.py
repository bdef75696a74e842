"""
TTL Cache - bounded in-memory store with per-entry expiry.

- Lazy expiry on get/has, eager expiry on the periodic sweep
- Capacity eviction removes the oldest write first (not access-order LRU)
- The sweep is an APScheduler interval job; call destroy() to stop it

The clock is injectable so expiry can be driven deterministically in tests.
It must return seconds and never go backwards.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """A cached value with the time it was written and its time-to-live."""
    value: Any
    written_at: float
    ttl: float


@dataclass
class CacheConfig:
    """Cache sizing and timing. All durations are in seconds."""
    default_ttl: float = 60 * 60
    max_size: int = 1000
    cleanup_interval: float = 60 * 5

    def __post_init__(self):
        if self.max_size < 1:
            raise ValueError(f"max_size must be positive, got {self.max_size}")
        if self.default_ttl < 0:
            raise ValueError(f"default_ttl must not be negative, got {self.default_ttl}")
        if self.cleanup_interval <= 0:
            raise ValueError(f"cleanup_interval must be positive, got {self.cleanup_interval}")


@dataclass
class CacheStats:
    """Point-in-time snapshot of cache contents and hit counters."""
    total: int
    valid: int
    expired: int
    max_size: int
    hit_rate: float
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "valid": self.valid,
            "expired": self.expired,
            "max_size": self.max_size,
            "hit_rate": self.hit_rate,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }


def is_expired(entry: CacheEntry, now: float) -> bool:
    """An entry expires once strictly more than its TTL has elapsed."""
    return now - entry.written_at > entry.ttl


class TTLCache:
    """
    Bounded key/value store with per-entry TTL.

    After any set() returns, size() <= max_size. New keys written at
    capacity evict the entry with the oldest write time. Overwriting an
    existing key replaces its entry and never evicts another key.

    Every operation takes the same lock, so the sweep thread and request
    threads never see a partially mutated map.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Clock = time.monotonic,
        scheduler=None,
        sweep: bool = True,
    ):
        """
        Args:
            config: Sizing and timing; defaults to CacheConfig()
            clock: Zero-arg callable returning seconds (non-decreasing)
            scheduler: APScheduler scheduler to run the sweep on. When omitted
                the cache starts and owns a BackgroundScheduler.
            sweep: Set False to disable the periodic sweep entirely
        """
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

        self._scheduler = scheduler
        self._owns_scheduler = False
        self._sweep_job_id: Optional[str] = None

        if sweep:
            self._start_sweep()

    @property
    def config(self) -> CacheConfig:
        return self._config

    def _start_sweep(self) -> None:
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(daemon=True)
            self._owns_scheduler = True

        job_id = f"ttl_cache_sweep_{id(self)}"
        self._scheduler.add_job(
            self.cleanup,
            'interval',
            seconds=self._config.cleanup_interval,
            id=job_id,
            name='TTL Cache Sweep',
            replace_existing=True,
        )
        self._sweep_job_id = job_id

        if self._owns_scheduler:
            self._scheduler.start()

        logger.debug(f"Cache sweep scheduled every {self._config.cleanup_interval}s")

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, evicting the oldest entries if a new key needs room."""
        if ttl is None:
            ttl = self._config.default_ttl

        with self._lock:
            if key in self._entries:
                # Re-insert at the end so map order stays write order
                del self._entries[key]
            else:
                while self._entries and len(self._entries) >= self._config.max_size:
                    self._evict_oldest()

            self._entries[key] = CacheEntry(value=value, written_at=self._clock(), ttl=ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                self._misses += 1
                return default

            if is_expired(entry, self._clock()):
                del self._entries[key]
                self._misses += 1
                return default

            self._hits += 1
            return entry.value

    def has(self, key: str) -> bool:
        """Check for a live entry. Expired entries are removed as a side effect."""
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                return False

            if is_expired(entry, self._clock()):
                del self._entries[key]
                return False

            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Raw entry count, including expired entries not yet swept."""
        with self._lock:
            return len(self._entries)

    def keys(self) -> List[str]:
        """Raw keys in write order, including expired entries not yet swept."""
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def cleanup(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired_keys = [k for k, entry in self._entries.items() if is_expired(entry, now)]
            for key in expired_keys:
                del self._entries[key]

        if expired_keys:
            logger.debug(f"Cache sweep removed {len(expired_keys)} expired entries")
        return len(expired_keys)

    def get_stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            expired = sum(1 for entry in self._entries.values() if is_expired(entry, now))
            total = len(self._entries)
            lookups = self._hits + self._misses

            return CacheStats(
                total=total,
                valid=total - expired,
                expired=expired,
                max_size=self._config.max_size,
                hit_rate=self._hits / lookups if lookups else 0.0,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def destroy(self) -> None:
        """Stop the sweep and drop all entries. Safe to call more than once."""
        with self._lock:
            job_id = self._sweep_job_id
            self._sweep_job_id = None

        if job_id is not None:
            if self._owns_scheduler:
                self._scheduler.shutdown(wait=False)
            else:
                try:
                    self._scheduler.remove_job(job_id)
                except JobLookupError:
                    logger.debug(f"Sweep job {job_id} was already removed")

        self.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.destroy()

    def _evict_oldest(self) -> None:
        # Keys are kept in write order, so the first one is the oldest write
        oldest_key = next(iter(self._entries))
        del self._entries[oldest_key]
        self._evictions += 1
        logger.debug(f"Evicted oldest cache entry {oldest_key}")
