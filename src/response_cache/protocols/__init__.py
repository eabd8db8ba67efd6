"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → in-memory, OpenAI → Ollama, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from response_cache.protocols import CacheStore, EmbeddingProvider

    store: CacheStore = RedisCacheStore.create(redis_url)  # works
    store: CacheStore = InMemoryCacheStore()               # also works
    ```
"""

from .cache_store import CacheStore
from .embedding_provider import EmbeddingProvider

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
]
