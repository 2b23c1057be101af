"""In-memory implementation of CacheStore.

Entries live only for the lifetime of the process. Each store is bounded
by a maximum entry count (least recently used entries are evicted first)
and every entry expires a fixed number of seconds after it was written.
"""

import time
from collections import OrderedDict
from typing import Any, Callable


class InMemoryCacheRepository:
    """Bounded LRU store with per-entry expiry.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    The clock is injectable so expiry can be tested without sleeping.

    Example:
        ```python
        pages = InMemoryCacheRepository(max_entries=200, ttl=300)
        pages.set("html:https://example.com/", "<html>...</html>")
        pages.get("html:https://example.com/")
        ```
    """

    def __init__(
        self,
        max_entries: int,
        ttl: float,
        clock: Callable[[], float] | None = None,
        name: str = "cache",
    ) -> None:
        """Initialize the repository.

        Args:
            max_entries: Capacity bound; inserting beyond it evicts the LRU entry.
            ttl: Seconds an entry stays readable after it was written.
            clock: Monotonic time source in seconds. Defaults to time.monotonic.
            name: Label used in statistics.
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        self._max_entries = max_entries
        self._ttl = ttl
        self._clock = clock or time.monotonic
        self._name = name
        # key -> (expires_at, value), ordered from least to most recently used
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self._misses += 1
            return None

        self._entries.move_to_end(key)
        self._hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock() + self._ttl, value)
        self._entries.move_to_end(key)

        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
            self._evictions += 1

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def count(self) -> int:
        self._purge_expired()
        return len(self._entries)

    def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with entry count, bounds and hit/miss counters
        """
        return {
            "name": self._name,
            "entries": self.count(),
            "max_entries": self._max_entries,
            "ttl_seconds": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
