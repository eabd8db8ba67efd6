"""Semantic Response Cache - reuse AI completions for equivalent queries.

A new query is matched against previously answered ones by embedding
similarity, scoped per completion model, and a cached response is
returned when the similarity clears the configured threshold.

Layers:
    - protocols: Interface contracts (CacheStore, EmbeddingProvider)
    - repositories: Redis/in-memory stores and embedding providers
    - services: CacheManager (business logic)
    - similarity: Cosine similarity and best-match selection
    - handlers, dto, api: HTTP surface
    - entities: Domain models (internal)

Usage:
    ```python
    from response_cache import CacheConfig, CacheManager
    from response_cache.repositories import OpenAIEmbeddingProvider, RedisCacheStore

    cache = CacheManager(
        store=RedisCacheStore.create("redis://localhost:6379"),
        embedding_provider=OpenAIEmbeddingProvider.create(api_key),
        config=CacheConfig(similarity_threshold=0.95),
    )
    ```
"""

from response_cache.config import CacheConfig, Settings, get_settings
from response_cache.entities import CachedEntry, CacheMatch, CacheStats
from response_cache.errors import (
    ConfigurationError,
    DimensionMismatch,
    EmbeddingFailure,
    MalformedEntry,
    SemanticCacheError,
    StoreUnavailable,
)
from response_cache.protocols import CacheStore, EmbeddingProvider
from response_cache.services import CacheManager, DisabledCache
from response_cache.similarity import cosine_similarity, find_best_match

__all__ = [
    # Configuration
    "CacheConfig",
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "CacheStore",
    "EmbeddingProvider",
    # Services (business logic)
    "CacheManager",
    "DisabledCache",
    # Similarity
    "cosine_similarity",
    "find_best_match",
    # Entities (domain models)
    "CachedEntry",
    "CacheMatch",
    "CacheStats",
    # Errors
    "SemanticCacheError",
    "ConfigurationError",
    "EmbeddingFailure",
    "StoreUnavailable",
    "MalformedEntry",
    "DimensionMismatch",
]
