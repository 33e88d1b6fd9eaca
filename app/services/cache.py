# app/services/cache.py
import threading
import time
from typing import Any, Callable, Dict, Optional

from app.core.config import settings
from app.core.logging import logger

CATEGORIES = "categories"
ARTWORKS = "artworks"


class _Entry:
    __slots__ = ("data", "last_fetched")

    def __init__(self):
        self.data: Any = None
        self.last_fetched: Optional[float] = None


class ResourceCache:
    """
    Time-boxed cache for the default listing of each resource type.

    An entry is EMPTY until `set`, FRESH while younger than its TTL, and
    behaves as EMPTY again once stale or after `invalidate`. Handlers run on
    a worker thread pool, so every read and write goes through one lock.
    """

    def __init__(self, ttls: Dict[str, float], clock: Callable[[], float] = time.monotonic):
        self.ttls = dict(ttls)
        self.clock = clock
        self._entries: Dict[str, _Entry] = {key: _Entry() for key in ttls}
        self._lock = threading.Lock()

    def _entry(self, key: str) -> _Entry:
        if key not in self._entries:
            raise KeyError(f"Unknown cache key: {key}")
        return self._entries[key]

    def _is_fresh(self, key: str, entry: _Entry) -> bool:
        return (
            entry.data is not None
            and entry.last_fetched is not None
            and (self.clock() - entry.last_fetched) < self.ttls[key]
        )

    def is_valid(self, key: str) -> bool:
        with self._lock:
            return self._is_fresh(key, self._entry(key))

    def get(self, key: str) -> Any:
        """Return the cached data, or None when the entry is empty or stale."""
        with self._lock:
            entry = self._entry(key)
            if self._is_fresh(key, entry):
                return entry.data
            return None

    def set(self, key: str, data: Any) -> None:
        with self._lock:
            entry = self._entry(key)
            entry.data = data
            entry.last_fetched = self.clock()

    def invalidate(self, key: str) -> None:
        with self._lock:
            entry = self._entry(key)
            entry.data = None
            entry.last_fetched = None
        logger.debug(f"Cache invalidated: {key}")

    def clear(self) -> None:
        for key in list(self._entries):
            self.invalidate(key)


# Create a singleton instance
resource_cache = ResourceCache(
    {
        CATEGORIES: settings.CATEGORIES_CACHE_TTL,
        ARTWORKS: settings.ARTWORKS_CACHE_TTL,
    }
)
