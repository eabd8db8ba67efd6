"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - The cache is built once during lifespan and stored in app.state
    - Dependency functions retrieve it from request.app.state
    - No process-wide singleton: tests inject their own cache
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from response_cache.config import Settings, get_settings
from response_cache.errors import ConfigurationError
from response_cache.handlers import CacheHandler
from response_cache.protocols import EmbeddingProvider
from response_cache.repositories import (
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    RedisCacheStore,
)
from response_cache.services import CacheManager, DisabledCache, SemanticCache

logger = logging.getLogger(__name__)


def build_embedding_provider(settings: Settings) -> EmbeddingProvider:
    """Create the embedding provider selected by ``EMBEDDING_PROVIDER``."""
    if settings.embedding_provider == "ollama":
        return OllamaEmbeddingProvider.create(
            model_name=settings.embedding_model,
            base_url=settings.ollama_base_url,
            # Known models report their own size so a mismatch is caught at startup
            dimension=(
                None
                if settings.embedding_model in OllamaEmbeddingProvider.MODEL_DIMENSIONS
                else settings.embedding_dimensions
            ),
        )
    if settings.embedding_provider == "local":
        # Imported here so sentence-transformers only loads when selected
        from response_cache.repositories.local_embedding_provider import LocalEmbeddingProvider

        return LocalEmbeddingProvider.create(model_name=settings.embedding_model)

    return OpenAIEmbeddingProvider.create(
        api_key=settings.openai_api_key or "",
        model_name=settings.embedding_model,
        dimension=settings.embedding_dimensions,
        base_url=settings.openai_base_url,
    )


def build_cache(settings: Settings) -> SemanticCache:
    """Build the cache described by ``settings``.

    Returns a DisabledCache when caching is switched off or a required
    setting is missing.

    Raises:
        ConfigurationError: If cache values are present but invalid
    """
    if not settings.cache_enabled:
        logger.info("Semantic cache disabled by SEMANTIC_CACHE_ENABLED")
        return DisabledCache("SEMANTIC_CACHE_ENABLED is false")

    missing = settings.missing_requirements
    if missing:
        logger.warning("%s not configured - semantic cache disabled", ", ".join(missing))
        return DisabledCache(f"missing {', '.join(missing)}")

    config = settings.cache_config()
    provider = build_embedding_provider(settings)
    # The local model only knows its size once loaded, so it is not checked here
    if settings.embedding_provider != "local" and provider.dimension != config.embedding_dimensions:
        raise ConfigurationError(
            f"EMBEDDING_DIMENSIONS is {config.embedding_dimensions} but {provider.model_name} "
            f"produces {provider.dimension}-dimensional embeddings"
        )

    store = RedisCacheStore.create(settings.redis_url or "", password=settings.redis_password)
    return CacheManager(store=store, embedding_provider=provider, config=config)


async def close_cache(cache: SemanticCache) -> None:
    """Release connections held by the cache's collaborators."""
    if not isinstance(cache, CacheManager):
        return
    for resource in (cache.store_backend, cache.embedding_provider):
        close = getattr(resource, "close", None)
        if close is not None:
            await close()


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Uses the cache passed to ``create_app`` if there is one, otherwise
    builds it from settings. Only a cache built here is closed on shutdown.
    """
    cache = getattr(app.state, "injected_cache", None)
    owned = cache is None
    if owned:
        cache = build_cache(get_settings())

    app.state.cache = cache
    app.state.cache_handler = CacheHandler(cache=cache)

    if isinstance(cache, CacheManager):
        logger.info(
            "Semantic cache initialized (threshold=%.2f ttl=%ds max_results=%d embedding_model=%s)",
            cache.config.similarity_threshold,
            cache.config.ttl_seconds,
            cache.config.max_results,
            cache.config.embedding_model,
        )
    else:
        logger.info("Semantic cache not active: %s", cache.reason)

    yield

    del app.state.cache_handler
    del app.state.cache
    if owned:
        await close_cache(cache)
    logger.info("Semantic cache shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
