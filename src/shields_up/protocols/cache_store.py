"""Cache storage protocol.

Defines the interface for the bounded, time-expiring stores backing the
page cache and the asset cache. Both tiers use the same protocol with
independent capacity bounds.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for single-key cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed. Single-key get/set are the only
    operations services rely on; no multi-key transactions occur.
    """

    def get(self, key: str) -> Any | None:
        """Return the live value for key, or None when missing or expired."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry.

        Args:
            key: Cache key (the last writer for a key wins)
            value: The value to store
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete an entry by key.

        Returns:
            True if deleted, False otherwise
        """
        ...

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries deleted
        """
        ...

    def count(self) -> int:
        """Count live entries."""
        ...

    def get_stats(self) -> dict:
        """Get store statistics (entries, bounds, hit/miss counters)."""
        ...
