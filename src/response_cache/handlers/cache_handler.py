"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error responses.
"""

import time

from fastapi import HTTPException, status

from response_cache.dto import (
    CacheStatsResponse,
    ClearModelResponse,
    HealthCheckResponse,
    LookupRequest,
    LookupResponse,
    StoreRequest,
    StoreResponse,
)
from response_cache.errors import StoreUnavailable
from response_cache.services import SemanticCache


class CacheHandler:
    """HTTP handlers for cache operations.

    Lookup and store never fail: the cache absorbs its own errors and
    reports a miss or a skipped write. Administrative operations (clear,
    stats) surface store outages as 503.
    """

    def __init__(self, cache: SemanticCache) -> None:
        """Initialize the cache handler.

        Args:
            cache: The cache manager, or a DisabledCache.
        """
        self._cache = cache

    async def lookup(self, request: LookupRequest) -> LookupResponse:
        """Handle POST /cache/lookup requests."""
        start_time = time.perf_counter()
        match = await self._cache.lookup(request.query, request.model)
        lookup_time_ms = (time.perf_counter() - start_time) * 1000

        if match is None:
            return LookupResponse(
                query=request.query,
                model=request.model,
                is_hit=False,
                lookup_time_ms=lookup_time_ms,
            )

        return LookupResponse(
            query=request.query,
            model=request.model,
            is_hit=True,
            response=match.response,
            similarity=match.similarity,
            cached_query=match.entry.query,
            cached_at=match.entry.created_at,
            tokens_saved=match.tokens_saved,
            cost_saved_usd=match.cost_saved_usd,
            lookup_time_ms=lookup_time_ms,
        )

    async def store(self, request: StoreRequest) -> StoreResponse:
        """Handle POST /cache/store requests."""
        key = await self._cache.store(
            request.query,
            request.response,
            request.model,
            request.tokens_in,
            request.tokens_out,
            request.cost_usd,
            metadata=request.metadata,
        )

        if key is None:
            return StoreResponse(stored=False, message="Entry was not cached")
        return StoreResponse(stored=True, key=key, message="Entry stored successfully")

    async def clear_model(self, model: str) -> ClearModelResponse:
        """Handle DELETE /cache/{model} requests.

        Raises:
            HTTPException: 503 if the store is unreachable
        """
        try:
            count = await self._cache.clear_model(model)
        except StoreUnavailable as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to clear cache: {e}",
            ) from e

        return ClearModelResponse(model=model, deleted_count=count)

    async def stats(self, model: str | None = None) -> CacheStatsResponse:
        """Handle GET /cache/stats requests.

        Raises:
            HTTPException: 503 if the store is unreachable
        """
        try:
            stats = await self._cache.stats(model)
        except StoreUnavailable as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to get stats: {e}",
            ) from e

        return CacheStatsResponse(
            total_entries=stats.total_entries,
            per_model_counts=stats.per_model_counts,
            oldest_entry=stats.oldest_entry,
            newest_entry=stats.newest_entry,
            cache_enabled=self._cache.enabled,
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = await self._cache.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_enabled=self._cache.enabled,
            cache_healthy=is_healthy,
        )
