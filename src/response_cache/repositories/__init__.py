"""Repository layer for data access.

This layer wraps external collaborators (Redis, embedding APIs) behind the
protocol interfaces in ``response_cache.protocols``. The repositories are
protocol-based (structural typing), not inheritance-based.

``LocalEmbeddingProvider`` is not re-exported here because importing it
loads sentence-transformers; import it from its module when needed.
"""

from response_cache.protocols import CacheStore, EmbeddingProvider

from .memory_store import InMemoryCacheStore
from .ollama_embedding_provider import OllamaEmbeddingProvider
from .openai_embedding_provider import OpenAIEmbeddingProvider
from .records import EntryRecord, decode_entry, encode_entry
from .redis_store import RedisCacheStore

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "OpenAIEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "EntryRecord",
    "encode_entry",
    "decode_entry",
]
