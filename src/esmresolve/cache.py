"""Cache of resolution results keyed by specifier and parent URL."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import Constants
from .models import Resolution


@dataclass
class CacheEntry:
    """A single cached resolution."""

    value: Resolution
    created_at: float = field(default_factory=time.time)


class ResolutionCache:
    """Insert-if-absent cache of resolution results.

    Entries are never invalidated: once a key is stored, every later lookup
    returns the identical ``Resolution`` object, even if the file system has
    changed since. Callers that need fresh results bypass the cache instead.
    A lock guards the map so one cache can be shared between threads.
    """

    def __init__(self):
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(specifier: str, parent_url: str) -> str:
        """Generate cache key."""
        return f"{specifier}{Constants.CACHE_KEY_SEPARATOR}{parent_url}"

    def get(self, specifier: str, parent_url: str) -> Optional[Resolution]:
        """Get a cached resolution.

        Args:
            specifier: The specifier as written in the importing module.
            parent_url: URL of the importing module.

        Returns:
            The cached resolution or None if not cached.
        """
        key = self.make_key(specifier, parent_url)
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, specifier: str, parent_url: str, resolution: Resolution) -> Resolution:
        """Cache a resolution unless the key is already present.

        Returns:
            The resolution stored under the key, which is the existing one if
            another caller stored it first.
        """
        key = self.make_key(specifier, parent_url)
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                entry = CacheEntry(value=resolution)
                self._cache[key] = entry
            return entry.value

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "total_entries": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache
