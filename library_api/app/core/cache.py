"""
In‑memory cache for read‑only query results.

The cache is an optimisation only.  Nothing in the service layer
reads custody or association state from it when deciding whether an
operation is allowed; it only short‑circuits repeated search and
lookup queries.  Every write that could change such a result calls
``invalidate`` with the affected prefix, and the cache is disabled
entirely unless ``settings.cache_enabled`` is set.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .config import settings


logger = logging.getLogger(__name__)


class CacheManager:
    """Thread‑safe TTL cache keyed by string."""

    def __init__(self, enabled: Optional[bool] = None) -> None:
        self._enabled = enabled
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.RLock()
        # Bumped on every invalidation; a value computed across a bump
        # is returned to its caller but not stored.
        self._generation = 0
        self.stats = {"hits": 0, "misses": 0}

    @property
    def enabled(self) -> bool:
        if self._enabled is not None:
            return self._enabled
        return settings.cache_enabled

    def get_or_compute(self, key: str, ttl_seconds: int, fn: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or compute and store it.

        With the cache disabled ``fn`` is called on every lookup and
        nothing is stored.
        """
        if not self.enabled:
            return fn()
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[1] > now:
                self.stats["hits"] += 1
                return entry[0]
            self.stats["misses"] += 1
            generation = self._generation
        value = fn()
        with self._lock:
            if generation == self._generation:
                self._entries[key] = (value, now + ttl_seconds)
        return value

    def invalidate(self, prefix: str) -> int:
        """Drop every entry whose key starts with ``prefix``.

        Returns the number of entries removed.
        """
        with self._lock:
            self._generation += 1
            stale = [key for key in self._entries if key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %s cache entries with prefix %r", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.stats = {"hits": 0, "misses": 0}


cache_manager = CacheManager()
