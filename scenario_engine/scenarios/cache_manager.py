"""
Scenario Cache Manager.

Wraps a TTLCache with scenario semantics:
- Keys are scenario:{slug}:{locale}
- Invalidation by slug for one locale or all of them
- Warm-up through a caller-supplied content generator
- Trending ranking from per-key access counts
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from scenario_engine.cache import CacheConfig, CacheStats, TTLCache, make_cache_key
from scenario_engine.scenarios.codec import parse_request_slug
from scenario_engine.scenarios.schemas import CachedScenario, ScenarioMetadata, ScenarioParameters

logger = logging.getLogger(__name__)

SCENARIO_PREFIX = "scenario"

# Generated content lives longer than generic cache entries
SCENARIO_CACHE_CONFIG = CacheConfig(
    default_ttl=60 * 60 * 24,
    max_size=500,
    cleanup_interval=60 * 10,
)

ContentGenerator = Callable[[ScenarioParameters, str], Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AccessRecord:
    """Hit count and recency for one cache key."""
    hits: int = 0
    last_seen: int = 0


class ScenarioCacheManager:
    """
    Cache for generated scenario content, keyed by slug and locale.

    The manager owns its TTLCache unless one is injected. Call destroy() on
    shutdown to stop the cache sweep.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        cache: Optional[TTLCache] = None,
        clock: Callable[[], float] = time.monotonic,
        scheduler=None,
        sweep: bool = True,
        now: Callable[[], datetime] = _utcnow,
    ):
        if cache is None:
            cache = TTLCache(
                config or SCENARIO_CACHE_CONFIG,
                clock=clock,
                scheduler=scheduler,
                sweep=sweep,
            )
        self._cache = cache
        self._now = now

        self._access: Dict[str, AccessRecord] = {}
        self._access_seq = 0
        self._lock = threading.Lock()

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @staticmethod
    def cache_key(slug: str, locale: str) -> str:
        return make_cache_key(SCENARIO_PREFIX, slug, locale)

    # -------------------------------------------------------------------------
    # Read / write
    # -------------------------------------------------------------------------

    def cache_scenario(
        self,
        slug: str,
        content: Any,
        params: ScenarioParameters,
        locale: str,
    ) -> CachedScenario:
        """Store generated content for a slug and locale."""
        cached = CachedScenario(
            content=content,
            metadata=ScenarioMetadata(
                slug=slug,
                params=params,
                generated_at=self._now(),
                locale=locale,
            ),
        )
        self._cache.set(self.cache_key(slug, locale), cached)
        return cached

    def get_scenario(self, slug: str, locale: str) -> Optional[CachedScenario]:
        key = self.cache_key(slug, locale)
        cached = self._cache.get(key)
        if cached is not None:
            self._record_access(key)
        return cached

    def has_scenario(self, slug: str, locale: str) -> bool:
        return self._cache.has(self.cache_key(slug, locale))

    def get_or_generate(
        self,
        slug: str,
        locale: str,
        generate: ContentGenerator,
    ) -> Optional[CachedScenario]:
        """
        Cache-first lookup that generates and stores content on a miss.

        Returns None when the slug is malformed or out of range. Errors
        raised by the generator propagate to the caller.
        """
        cached = self.get_scenario(slug, locale)
        if cached is not None:
            return cached

        params = parse_request_slug(slug)
        if params is None:
            return None

        logger.info(f"Generating scenario {slug} ({locale}) on cache miss")
        content = generate(params, locale)
        return self.cache_scenario(slug, content, params, locale)

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    def invalidate_scenario(self, slug: str, locale: Optional[str] = None) -> int:
        """
        Remove cached content for a slug.

        With a locale only that entry is removed; without one every locale
        for the slug is removed (a scan over all keys).

        Returns:
            Number of entries removed
        """
        if locale is not None:
            keys = [self.cache_key(slug, locale)]
        else:
            prefix = make_cache_key(SCENARIO_PREFIX, slug) + ":"
            keys = [k for k in self._cache.keys() if k.startswith(prefix)]

        removed = sum(1 for key in keys if self._cache.delete(key))

        with self._lock:
            for key in keys:
                self._access.pop(key, None)

        if removed:
            logger.info(f"Invalidated {removed} cached entries for scenario {slug}")
        return removed

    def clear(self) -> None:
        self._cache.clear()
        with self._lock:
            self._access.clear()

    # -------------------------------------------------------------------------
    # Warm-up
    # -------------------------------------------------------------------------

    def warm_cache(
        self,
        scenarios: Iterable[Mapping[str, str]],
        generate: ContentGenerator,
    ) -> dict:
        """
        Pre-generate content for popular scenarios.

        Each item is a mapping with "slug" and "locale". Items already cached
        are skipped. A failure on one item is logged and recorded, and the
        rest of the batch still runs.

        Returns summary of the warm-up run.
        """
        scenarios = list(scenarios)
        logger.info(f"Cache warming initiated for {len(scenarios)} scenarios")

        summary = {
            "requested": len(scenarios),
            "warmed": 0,
            "skipped": 0,
            "errors": [],
        }

        for item in scenarios:
            slug = locale = None
            try:
                if not isinstance(item, Mapping):
                    raise TypeError(f"Warm-up item must be a mapping, got {type(item).__name__}")

                slug = item.get("slug")
                locale = item.get("locale")
                if not slug or not locale:
                    raise ValueError("Warm-up item needs both slug and locale")

                if self.has_scenario(slug, locale):
                    summary["skipped"] += 1
                    continue

                params = parse_request_slug(slug)
                if params is None:
                    raise ValueError(f"Invalid scenario slug: {slug}")

                content = generate(params, locale)
                self.cache_scenario(slug, content, params, locale)
                summary["warmed"] += 1

            except Exception as e:
                logger.error(f"Cache warm-up failed for {slug} ({locale}): {e}")
                summary["errors"].append({
                    "slug": slug,
                    "locale": locale,
                    "error": str(e),
                })

        logger.info(
            f"Cache warming completed: {summary['warmed']} warmed, "
            f"{summary['skipped']} skipped, {len(summary['errors'])} errors"
        )
        return summary

    # -------------------------------------------------------------------------
    # Trending & stats
    # -------------------------------------------------------------------------

    def _record_access(self, key: str) -> None:
        with self._lock:
            self._access_seq += 1
            record = self._access.setdefault(key, AccessRecord())
            record.hits += 1
            record.last_seen = self._access_seq

            # Keep one record per cached key at most
            if len(self._access) > self._cache.config.max_size:
                self._prune_access(set(self._cache.keys()))

    def _prune_access(self, live) -> None:
        for key in [k for k in self._access if k not in live]:
            del self._access[key]

    def get_trending_scenarios(self, limit: int = 10) -> List[str]:
        """
        Most accessed scenario keys still in the cache.

        Ranked by hit count, then by most recent access. Keys that were
        never read keep their write order after the accessed ones.
        """
        prefix = SCENARIO_PREFIX + ":"
        live_keys = [k for k in self._cache.keys() if k.startswith(prefix) and self._cache.has(k)]

        with self._lock:
            # Forget keys that were evicted or expired
            self._prune_access(set(live_keys))

            def rank(key: str):
                record = self._access.get(key)
                if record is None:
                    return (0, 0)
                return (record.hits, record.last_seen)

            ranked = sorted(live_keys, key=rank, reverse=True)

        return ranked[:max(0, limit)]

    def get_stats(self) -> CacheStats:
        return self._cache.get_stats()

    def destroy(self) -> None:
        self._cache.destroy()
        with self._lock:
            self._access.clear()
