#!/usr/bin/env python3
"""
Demo script for the semantic response cache.

Stores a few answers, then looks up rephrased and unrelated questions.
Uses the embedding provider configured in the environment (see
``Settings``) and an in-memory store, so Redis is not required.
"""

import asyncio
import logging

from response_cache import CacheManager
from response_cache.api.dependencies import build_embedding_provider
from response_cache.config import get_settings
from response_cache.repositories import InMemoryCacheStore

MODEL = "gpt-4"

QA_PAIRS = [
    ("What's the capital of France?", "Paris is the capital of France."),
    ("How do I reverse a list in Python?", "Use my_list.reverse() or my_list[::-1]."),
    ("What is semantic caching?", "Reusing answers for questions that mean the same thing."),
]

QUERIES = [
    "What is the capital of France?",
    "how can I reverse a Python list",
    "Explain semantic caching",
    "What's the weather in Tokyo?",
]


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    provider = build_embedding_provider(settings)
    cache = CacheManager(
        store=InMemoryCacheStore(),
        embedding_provider=provider,
        config=settings.cache_config(),
    )

    print_section(f"Storing answers ({provider.model_name})")
    for query, answer in QA_PAIRS:
        key = await cache.store(query, answer, MODEL, tokens_in=12, tokens_out=20, cost_usd=0.0012)
        print(f"  {'✓' if key else '✗'} {query}")

    print_section(f"Lookups (threshold {cache.config.similarity_threshold})")
    for query in QUERIES:
        match = await cache.lookup(query, MODEL)
        if match is None:
            print(f"\n  {query}\n  ✗ Cache miss")
            continue
        print(f"\n  {query}\n  ✓ CACHE HIT (similarity {match.similarity:.4f})")
        print(f"  Response: {match.response}")

    stats = await cache.stats()
    print_section("Stats")
    print(f"  Entries: {stats.total_entries} {stats.per_model_counts}")


if __name__ == "__main__":
    asyncio.run(main())
