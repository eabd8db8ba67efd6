"""Cache storage protocol.

Defines the key-value interface the cache needs from its backing store:
point reads, writes with a TTL, prefix enumeration and bulk deletion.
Similarity search happens in the cache itself, so the store needs no
vector capabilities.

Implementations:
- Redis (default)
- In-memory (tests, local development)
"""

from typing import Protocol, runtime_checkable

from response_cache.entities import CachedEntry


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Implementations raise ``StoreUnavailable`` when the backend cannot be
    reached and ``MalformedEntry`` when a stored record cannot be decoded.
    """

    async def get(self, key: str) -> CachedEntry | None:
        """Fetch one entry.

        Args:
            key: The storage key

        Returns:
            The entry, or None if it does not exist or has expired
        """
        ...

    async def set_with_ttl(self, key: str, entry: CachedEntry, ttl_seconds: int) -> None:
        """Write an entry that expires after ``ttl_seconds``.

        Args:
            key: The storage key
            entry: The entry to write
            ttl_seconds: Time-to-live in seconds
        """
        ...

    async def keys_by_prefix(self, prefix: str) -> list[str]:
        """List every live key starting with ``prefix``.

        Args:
            prefix: Literal key prefix (not a glob pattern)

        Returns:
            Matching keys in the store's enumeration order
        """
        ...

    async def delete_many(self, keys: list[str]) -> int:
        """Delete the given keys.

        Args:
            keys: Keys to delete

        Returns:
            Number of keys that existed and were deleted
        """
        ...

    async def ping(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
