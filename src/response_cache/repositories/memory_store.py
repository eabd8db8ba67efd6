"""In-memory implementation of CacheStore.

Mimics the Redis store: records are JSON-encoded, expire after their TTL
and are enumerated in insertion order. Useful for unit tests and local
development without Redis.
"""

import time
from collections.abc import Callable

from response_cache.entities import CachedEntry

from .records import decode_entry, encode_entry


class InMemoryCacheStore:
    """Dict-backed store satisfying the CacheStore protocol.

    Args:
        clock: Returns the current time in seconds. Tests pass a virtual
            clock to simulate TTL expiry.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float]] = {}

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (_, expires_at) in self._data.items() if expires_at <= now]:
            del self._data[key]

    async def get(self, key: str) -> CachedEntry | None:
        self._purge_expired()
        item = self._data.get(key)
        if item is None:
            return None
        return decode_entry(key, item[0])

    async def set_with_ttl(self, key: str, entry: CachedEntry, ttl_seconds: int) -> None:
        self.write_raw(key, encode_entry(entry), ttl_seconds)

    def write_raw(self, key: str, payload: str, ttl_seconds: int) -> None:
        """Write an already-encoded payload, e.g. one produced by another writer."""
        # Re-inserting moves the key to the end, as a fresh Redis key would
        self._data.pop(key, None)
        self._data[key] = (payload, self._clock() + ttl_seconds)

    async def keys_by_prefix(self, prefix: str) -> list[str]:
        self._purge_expired()
        return [key for key in self._data if key.startswith(prefix)]

    async def delete_many(self, keys: list[str]) -> int:
        self._purge_expired()
        count = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                count += 1
        return count

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._data)
