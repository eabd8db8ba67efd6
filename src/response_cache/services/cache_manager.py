"""Cache manager for core business logic.

This service orchestrates cache operations by coordinating the store
(data access), the embedding provider (vector generation) and the
similarity scan. Every failure on the request path is absorbed here:
a lookup that cannot complete is a miss, a store that cannot complete
is skipped. Caching is an optimization, never a correctness requirement.
"""

import asyncio
import logging
import math
import time
from datetime import datetime, timezone
from typing import Any

from response_cache.config import CacheConfig
from response_cache.entities import CachedEntry, CacheMatch, CacheStats
from response_cache.errors import EmbeddingFailure, MalformedEntry, StoreUnavailable
from response_cache.keys import build_key, model_prefix, parse_key
from response_cache.protocols import CacheStore, EmbeddingProvider
from response_cache.similarity import find_best_match

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    """Lowercase and trim, so case/whitespace variants share one embedding."""
    return query.strip().lower()


class CacheManager:
    """Core semantic cache orchestration.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: Redis, in-memory, ...
    - EmbeddingProvider: OpenAI, Ollama, sentence-transformers, ...

    Entries are partitioned by completion model: a response cached for
    ``gpt-4`` is never returned for a ``gpt-3.5-turbo`` request.

    Lookups scan at most ``max_results`` keys, taken in the store's listing
    order. This is a linear scan, adequate for small per-model caches; it is
    not a vector index, and listing order is not guaranteed to be recency.

    Example:
        ```python
        cache = CacheManager(
            store=RedisCacheStore.create("redis://localhost:6379"),
            embedding_provider=OpenAIEmbeddingProvider.create(api_key),
            config=CacheConfig(similarity_threshold=0.93),
        )

        match = await cache.lookup(prompt, model="gpt-4")
        if match is None:
            answer = await complete(prompt)
            await cache.store(prompt, answer.text, "gpt-4", answer.tokens_in,
                              answer.tokens_out, answer.cost_usd)
        ```
    """

    enabled = True

    def __init__(
        self,
        store: CacheStore,
        embedding_provider: EmbeddingProvider,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache manager.

        Args:
            store: Cache storage backend (required).
            embedding_provider: Embedding generation service (required).
            config: Validated configuration. Defaults to ``CacheConfig()``.
        """
        self._store = store
        self._embeddings = embedding_provider
        self._config = config or CacheConfig()

    @classmethod
    def create(
        cls,
        store: CacheStore,
        embedding_provider: EmbeddingProvider,
        **overrides: Any,
    ) -> "CacheManager":
        """Alternative constructor taking configuration values as keywords.

        Raises:
            ConfigurationError: If any value is invalid

        Example:
            ```python
            cache = CacheManager.create(store, provider, similarity_threshold=0.9)
            ```
        """
        return cls(store=store, embedding_provider=embedding_provider, config=CacheConfig(**overrides))

    async def lookup(self, query: str, model: str) -> CacheMatch | None:
        """Find a cached response semantically equivalent to ``query``.

        Business logic:
        1. Normalize the query and generate its embedding
        2. List the model's keys and fetch up to ``max_results`` entries
        3. Pick the most similar entry at or above the threshold

        Never raises for embedding, store or timeout failures; those are
        logged and reported as a miss.

        Args:
            query: The incoming request text
            model: Completion model the caller is about to invoke

        Returns:
            CacheMatch on a hit, None on a miss
        """
        start_time = time.perf_counter()
        try:
            match = await asyncio.wait_for(
                self._find(normalize_query(query), model),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Semantic cache lookup timed out after %.1fs (model=%s)",
                self._config.timeout_seconds,
                model,
            )
            return None
        except EmbeddingFailure as e:
            logger.warning("Semantic cache lookup skipped, embedding failed: %s", e)
            return None
        except StoreUnavailable as e:
            logger.warning("Semantic cache lookup skipped, store unavailable: %s", e)
            return None
        except Exception:
            logger.exception("Semantic cache lookup failed (model=%s)", model)
            return None

        duration_ms = (time.perf_counter() - start_time) * 1000
        if match is None:
            logger.debug(
                "Semantic cache MISS model=%s threshold=%.2f duration_ms=%.1f",
                model,
                self._config.similarity_threshold,
                duration_ms,
            )
            return None

        logger.info(
            "Semantic cache HIT model=%s similarity=%.4f threshold=%.2f duration_ms=%.1f cached_query=%r",
            model,
            match.similarity,
            self._config.similarity_threshold,
            duration_ms,
            match.entry.query[:50],
        )
        return match

    async def _find(self, normalized: str, model: str) -> CacheMatch | None:
        query_embedding = await self._embed(normalized)

        keys = await self._model_keys(model)
        if not keys:
            return None

        # First N in listing order, which is not necessarily recency order
        candidates = await self._fetch_candidates(keys[: self._config.max_results])
        return find_best_match(candidates, query_embedding, self._config.similarity_threshold)

    async def _embed(self, text: str) -> list[float]:
        embedding = await self._embeddings.encode(text)
        if len(embedding) != self._config.embedding_dimensions:
            raise EmbeddingFailure(
                f"Provider {self._embeddings.model_name} returned {len(embedding)} dimensions, "
                f"expected {self._config.embedding_dimensions}"
            )
        if not all(math.isfinite(value) for value in embedding):
            raise EmbeddingFailure(
                f"Provider {self._embeddings.model_name} returned non-finite embedding values"
            )
        return embedding

    async def _model_keys(self, model: str) -> list[str]:
        keys = await self._store.keys_by_prefix(model_prefix(self._config.namespace, model))
        result = []
        for key in keys:
            # "llama3:" also prefixes keys of "llama3:8b"
            parsed = parse_key(key)
            if parsed is not None and parsed.model == model:
                result.append(key)
        return result

    async def _fetch_candidates(self, keys: list[str]) -> list[tuple[str, CachedEntry]]:
        results = await asyncio.gather(
            *(self._store.get(key) for key in keys),
            return_exceptions=True,
        )

        candidates = []
        dimensions = self._config.embedding_dimensions
        for key, result in zip(keys, results):
            if isinstance(result, MalformedEntry):
                logger.warning("Skipping malformed cache entry: %s", result)
                continue
            if isinstance(result, Exception):
                logger.warning("Skipping cache entry %s, fetch failed: %s", key, result)
                continue
            if isinstance(result, BaseException):
                raise result
            if result is None:
                # Expired between listing and fetching
                continue
            if len(result.embedding) != dimensions:
                logger.warning(
                    "Skipping cache entry %s: embedding has %d dimensions, expected %d. "
                    "Clear the cache after changing the embedding model.",
                    key,
                    len(result.embedding),
                    dimensions,
                )
                continue
            candidates.append((key, result))
        return candidates

    async def store(
        self,
        query: str,
        response: str,
        model: str,
        tokens_in: int,
        tokens_out: int,
        cost_usd: float,
        metadata: dict[str, Any] | None = None,
    ) -> str | None:
        """Cache a freshly generated response.

        Business logic:
        1. Normalize the query and generate its embedding
        2. Build an immutable entry under a collision-resistant key
        3. Write it with the configured TTL

        Never raises for embedding, store or timeout failures; the caller is
        in the middle of serving a real response.

        Args:
            query: The original request text
            response: The response produced by the completion model
            model: Completion model that produced the response
            tokens_in: Prompt tokens used
            tokens_out: Completion tokens used
            cost_usd: Cost of the completion
            metadata: Optional extra data stored with the entry

        Returns:
            The storage key, or None if nothing was written
        """
        try:
            return await asyncio.wait_for(
                self._write(query, response, model, tokens_in, tokens_out, cost_usd, metadata),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Semantic cache store timed out after %.1fs (model=%s)",
                self._config.timeout_seconds,
                model,
            )
        except EmbeddingFailure as e:
            logger.warning("Semantic cache store skipped, embedding failed: %s", e)
        except StoreUnavailable as e:
            logger.error("Failed to store in semantic cache: %s", e)
        except Exception:
            logger.exception("Failed to store in semantic cache (model=%s)", model)
        return None

    async def _write(
        self,
        query: str,
        response: str,
        model: str,
        tokens_in: int,
        tokens_out: int,
        cost_usd: float,
        metadata: dict[str, Any] | None,
    ) -> str:
        normalized = normalize_query(query)
        embedding = await self._embed(normalized)

        entry = CachedEntry(
            query=normalized,
            response=response,
            embedding=embedding,
            model=model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            cost_usd=cost_usd,
            created_at=datetime.now(timezone.utc),
            metadata=dict(metadata or {}),
        )
        key = build_key(self._config.namespace, model)
        await self._store.set_with_ttl(key, entry, self._config.ttl_seconds)

        logger.debug(
            "Stored in semantic cache key=%s ttl=%d query_length=%d response_length=%d",
            key,
            self._config.ttl_seconds,
            len(normalized),
            len(response),
        )
        return key

    async def clear_model(self, model: str) -> int:
        """Delete every cached entry of one completion model.

        Args:
            model: The completion model to clear

        Returns:
            Number of entries removed (0 if there were none)

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        keys = await self._model_keys(model)
        if not keys:
            return 0

        count = await self._store.delete_many(keys)
        logger.info("Cleared semantic cache for model=%s count=%d", model, count)
        return count

    async def stats(self, model: str | None = None) -> CacheStats:
        """Count cached entries, overall or for one model.

        Oldest/newest timestamps come from the key ids and are best-effort.

        Args:
            model: Restrict to this completion model

        Returns:
            CacheStats snapshot

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        namespace = self._config.namespace
        keys = await self._store.keys_by_prefix(model_prefix(namespace, model))

        counts: dict[str, int] = {}
        timestamps: list[datetime] = []
        for key in keys:
            parsed = parse_key(key)
            if parsed is None or parsed.namespace != namespace:
                continue
            if model is not None and parsed.model != model:
                continue
            counts[parsed.model] = counts.get(parsed.model, 0) + 1
            if parsed.created_at is not None:
                timestamps.append(parsed.created_at)

        return CacheStats(
            total_entries=sum(counts.values()),
            per_model_counts=counts,
            oldest_entry=min(timestamps) if timestamps else None,
            newest_entry=max(timestamps) if timestamps else None,
        )

    async def is_healthy(self) -> bool:
        """Check if cache is healthy.

        Returns:
            True if both store and embeddings are reachable
        """
        store_healthy = await self._store.ping()
        embeddings_healthy = await self._embeddings.is_available()
        return store_healthy and embeddings_healthy

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def store_backend(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings


class DisabledCache:
    """Stand-in used when caching is switched off or not configured.

    Exposes the same async surface as ``CacheManager`` but never stores
    and always misses. Callers can tell it apart from a cache that is
    failing through ``enabled``.
    """

    enabled = False

    def __init__(self, reason: str = "disabled") -> None:
        self.reason = reason

    async def lookup(self, query: str, model: str) -> CacheMatch | None:
        return None

    async def store(
        self,
        query: str,
        response: str,
        model: str,
        tokens_in: int,
        tokens_out: int,
        cost_usd: float,
        metadata: dict[str, Any] | None = None,
    ) -> str | None:
        return None

    async def clear_model(self, model: str) -> int:
        return 0

    async def stats(self, model: str | None = None) -> CacheStats:
        return CacheStats()

    async def is_healthy(self) -> bool:
        return True


SemanticCache = CacheManager | DisabledCache
