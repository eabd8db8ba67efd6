"""Shared test fixtures for semantic cache tests."""

import asyncio
import random
from datetime import datetime, timezone

import pytest

from response_cache.config import CacheConfig
from response_cache.entities import CachedEntry
from response_cache.errors import EmbeddingFailure, StoreUnavailable
from response_cache.repositories import InMemoryCacheStore
from response_cache.services import CacheManager

DIM = 4

FRANCE = "what's the capital of france?"
FRANCE_REPHRASED = "what is the capital of france?"
WEATHER = "how is the weather today?"


class FakeEmbeddingProvider:
    """Deterministic provider returning preset vectors for known texts.

    Unknown texts get a pseudo-random vector seeded by the text, so the
    same text always embeds the same way.
    """

    def __init__(self, vectors: dict[str, list[float]] | None = None, dimension: int = DIM) -> None:
        self.vectors = dict(vectors or {})
        self._dimension = dimension
        self.fail = False
        self.delay = 0.0
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return "fake-embedding"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise EmbeddingFailure("embedding provider unreachable")
        if text in self.vectors:
            return list(self.vectors[text])
        rng = random.Random(text)
        return [rng.uniform(-1.0, 1.0) for _ in range(self._dimension)]

    async def is_available(self) -> bool:
        return not self.fail


class VirtualClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnavailableStore:
    """Store whose backend is always down."""

    async def get(self, key):
        raise StoreUnavailable("connection refused")

    async def set_with_ttl(self, key, entry, ttl_seconds):
        raise StoreUnavailable("connection refused")

    async def keys_by_prefix(self, prefix):
        raise StoreUnavailable("connection refused")

    async def delete_many(self, keys):
        raise StoreUnavailable("connection refused")

    async def ping(self):
        return False


def make_entry(
    embedding: list[float],
    response: str = "cached response",
    model: str = "gpt-4",
    query: str = "a query",
) -> CachedEntry:
    return CachedEntry(
        query=query,
        response=response,
        embedding=embedding,
        model=model,
        tokens_in=10,
        tokens_out=20,
        cost_usd=0.002,
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def memory_store(clock):
    """Create a fresh in-memory store driven by the virtual clock."""
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def provider():
    """Provider where the two France phrasings are ~0.995 similar."""
    return FakeEmbeddingProvider(
        {
            FRANCE: [1.0, 0.0, 0.0, 0.0],
            FRANCE_REPHRASED: [0.99, 0.1, 0.0, 0.0],
            WEATHER: [0.0, 0.0, 1.0, 0.0],
        }
    )


@pytest.fixture
def config():
    return CacheConfig(
        similarity_threshold=0.95,
        ttl_seconds=3600,
        max_results=10,
        embedding_dimensions=DIM,
        timeout_seconds=1.0,
    )


@pytest.fixture
def cache(memory_store, provider, config):
    """Create a cache manager over the in-memory store."""
    return CacheManager(store=memory_store, embedding_provider=provider, config=config)
