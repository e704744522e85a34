"""
Core cache client with basic caching functionality
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from src.config.cache_config import cache_config
from src.config.constants import CacheView
from src.shared.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Cache key tagged with its view so keys of different views never collide"""

    view: CacheView
    entity_id: Optional[int] = None

    @classmethod
    def all_products(cls) -> "CacheKey":
        return cls(CacheView.ALL_PRODUCTS)

    @classmethod
    def product(cls, product_id: int) -> "CacheKey":
        return cls(CacheView.PRODUCT, product_id)

    def __str__(self) -> str:
        if self.entity_id is None:
            return self.view.value
        return f"{self.view.value}:{self.entity_id}"


class CacheEntry:
    """Cache entry with expiration time"""

    def __init__(self, value: Any, ttl_seconds: int, now: float):
        self.value = value
        self.ttl_seconds = ttl_seconds
        self.created_at = now
        self.expires_at = now + ttl_seconds

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CoreCacheClient:
    """In-memory cache with per-entry TTL and optional LRU capacity"""

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        # Insertion order doubles as recency order for LRU eviction
        self._cache: "OrderedDict[CacheKey, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._clock = clock
        self._max_entries = (
            cache_config.MAX_ENTRIES if max_entries is None else max_entries
        )
        self._cleanup_interval = cache_config.CLEANUP_INTERVAL_MINUTES * 60
        self._last_cleanup = clock()
        self.hits = 0
        self.misses = 0

        # Generation stamps of the latest invalidation per key and per view.
        # A fill that started before a stamp must not land after it.
        self._generation = 0
        self._key_invalidated_at: Dict[CacheKey, int] = {}
        self._view_invalidated_at: Dict[CacheView, int] = {}

        logger.info(
            f"Core cache client initialized with in-memory storage "
            f"(max_entries={self._max_entries or 'unbounded'})"
        )

    def _cleanup_if_needed(self, now: float):
        """Clean up expired entries periodically"""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        expired_keys = [
            key for key, entry in self._cache.items() if entry.is_expired(now)
        ]
        for key in expired_keys:
            del self._cache[key]

        if expired_keys:
            logger.info(f"Cleaned up {len(expired_keys)} expired cache entries")

        self._last_cleanup = now

    def get(self, key: CacheKey) -> Tuple[Any, bool]:
        """Get value from cache as a (value, found) pair"""
        with self._lock:
            now = self._clock()
            self._cleanup_if_needed(now)

            entry = self._cache.get(key)
            if entry is None:
                self.misses += 1
                return None, False

            if entry.is_expired(now):
                del self._cache[key]
                self.misses += 1
                return None, False

            self._cache.move_to_end(key)
            self.hits += 1
            return entry.value, True

    def put(self, key: CacheKey, value: Any, ttl_seconds: Optional[int] = None):
        """Store value, replacing any previous entry and resetting its expiry"""
        ttl = cache_config.DEFAULT_TTL if ttl_seconds is None else ttl_seconds
        with self._lock:
            now = self._clock()
            if key in self._cache:
                del self._cache[key]
            elif self._max_entries and len(self._cache) >= self._max_entries:
                self._evict_lru()

            self._cache[key] = CacheEntry(value, ttl, now)

    def current_generation(self) -> int:
        """Token to take before loading a value from the store"""
        with self._lock:
            return self._generation

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def put_if_generation(
        self,
        key: CacheKey,
        value: Any,
        ttl_seconds: Optional[int],
        generation: int,
    ) -> bool:
        """
        Store value unless the key was invalidated after ``generation`` was taken.

        Returns False when the value was dropped because a newer write made it
        stale while it was being loaded.
        """
        with self._lock:
            invalidated_at = max(
                self._key_invalidated_at.get(key, 0),
                self._view_invalidated_at.get(key.view, 0),
            )
            if invalidated_at > generation:
                logger.debug(f"Dropped stale cache fill for {key}")
                return False

            self.put(key, value, ttl_seconds)
            return True

    def invalidate(self, key: CacheKey) -> bool:
        """Remove a single entry, a no-op for missing keys"""
        with self._lock:
            self._key_invalidated_at[key] = self._next_generation()
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def invalidate_prefix(self, view: CacheView) -> int:
        """Remove every entry belonging to a view family"""
        with self._lock:
            self._view_invalidated_at[view] = self._next_generation()
            keys_to_delete = [key for key in self._cache if key.view == view]
            for key in keys_to_delete:
                del self._cache[key]
            return len(keys_to_delete)

    def clear(self):
        with self._lock:
            generation = self._next_generation()
            for view in CacheView:
                self._view_invalidated_at[view] = generation
            self._cache.clear()

    def _evict_lru(self):
        """Evict least recently used entry"""
        lru_key, _ = self._cache.popitem(last=False)
        logger.debug(f"Evicted least recently used cache entry: {lru_key}")

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self._lock:
            now = self._clock()
            total_keys = len(self._cache)
            expired_keys = sum(
                1 for entry in self._cache.values() if entry.is_expired(now)
            )

            # Count by view
            view_counts: Dict[str, int] = {}
            for key in self._cache:
                view_counts[key.view.value] = view_counts.get(key.view.value, 0) + 1

            return {
                "backend": "in_memory",
                "total_keys": total_keys,
                "active_keys": total_keys - expired_keys,
                "expired_keys": expired_keys,
                "max_entries": self._max_entries,
                "hits": self.hits,
                "misses": self.misses,
                "view_breakdown": view_counts,
            }
