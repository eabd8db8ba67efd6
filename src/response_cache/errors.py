"""Error taxonomy for the semantic response cache.

Only ``ConfigurationError`` and ``DimensionMismatch`` are meant to escape
to callers. The others are raised by adapters and recovered inside
``CacheManager``, where they turn into a cache miss or a skipped write.
"""


class SemanticCacheError(Exception):
    """Base class for all cache errors."""


class ConfigurationError(SemanticCacheError, ValueError):
    """Invalid cache configuration, raised at construction time."""


class EmbeddingFailure(SemanticCacheError):
    """The embedding provider was unreachable or returned a bad response."""


class StoreUnavailable(SemanticCacheError):
    """The backing key-value store could not be reached."""


class MalformedEntry(SemanticCacheError):
    """A stored record could not be decoded into a cache entry."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Malformed cache entry {key!r}: {reason}")
        self.key = key
        self.reason = reason


class DimensionMismatch(SemanticCacheError, ValueError):
    """Two embeddings of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Embedding dimensions differ: {left} != {right}")
        self.left = left
        self.right = right
