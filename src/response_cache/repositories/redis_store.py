"""Redis implementation of CacheStore.

Entries are plain string keys holding JSON records, written with SETEX so
Redis itself expires them. Enumeration uses SCAN rather than KEYS so a
large keyspace never blocks the server.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from response_cache.entities import CachedEntry
from response_cache.errors import StoreUnavailable

from .records import decode_entry, encode_entry

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = "\\*?[]"


def escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so ``text`` matches literally."""
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIAL else ch for ch in text)


def _as_str(value: str | bytes) -> str:
    return value.decode() if isinstance(value, bytes) else value


class RedisCacheStore:
    """Redis store satisfying the CacheStore protocol.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    DELETE_BATCH_SIZE = 500

    def __init__(self, client: redis.Redis, scan_count: int = 1000) -> None:
        """Initialize the Redis store.

        Args:
            client: An asyncio Redis client.
            scan_count: COUNT hint for each SCAN call.
        """
        self._client = client
        self._scan_count = scan_count

    @classmethod
    def create(cls, redis_url: str, password: str | None = None) -> "RedisCacheStore":
        """Factory method to create a store from a connection URL.

        Args:
            redis_url: Redis connection URL (``redis://`` or ``rediss://``)
            password: Optional password, if not part of the URL

        Returns:
            Configured RedisCacheStore
        """
        client = redis.from_url(redis_url, password=password, decode_responses=True)
        return cls(client)

    async def get(self, key: str) -> CachedEntry | None:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            raise StoreUnavailable(f"Redis GET failed for {key}: {e}") from e

        if raw is None:
            return None
        return decode_entry(key, raw)

    async def set_with_ttl(self, key: str, entry: CachedEntry, ttl_seconds: int) -> None:
        try:
            await self._client.setex(key, ttl_seconds, encode_entry(entry))
        except RedisError as e:
            raise StoreUnavailable(f"Redis SETEX failed for {key}: {e}") from e

    async def keys_by_prefix(self, prefix: str) -> list[str]:
        pattern = f"{escape_glob(prefix)}*"
        try:
            keys = [
                _as_str(key)
                async for key in self._client.scan_iter(match=pattern, count=self._scan_count)
            ]
        except RedisError as e:
            raise StoreUnavailable(f"Redis SCAN failed for {pattern}: {e}") from e

        # SCAN may return a key more than once
        return list(dict.fromkeys(keys))

    async def delete_many(self, keys: list[str]) -> int:
        deleted = 0
        try:
            for start in range(0, len(keys), self.DELETE_BATCH_SIZE):
                batch = keys[start : start + self.DELETE_BATCH_SIZE]
                deleted += await self._client.delete(*batch)
        except RedisError as e:
            raise StoreUnavailable(f"Redis DEL failed after {deleted} deletions: {e}") from e
        return deleted

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    async def close(self) -> None:
        """Close the connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
