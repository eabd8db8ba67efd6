"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class LookupResponse(BaseModel):
    """Response DTO for a semantic lookup.

    On a miss only ``query``, ``model``, ``is_hit`` and ``lookup_time_ms``
    are set.
    """

    query: str = Field(..., description="The original query")
    model: str = Field(..., description="Completion model the lookup was scoped to")
    is_hit: bool = Field(..., description="Whether a cached response was found")
    response: str | None = Field(None, description="The cached response")
    similarity: float | None = Field(
        None,
        description="Cosine similarity of the match (1 = identical)",
        ge=-1.0,
        le=1.0,
    )
    cached_query: str | None = Field(None, description="Normalized query of the matched entry")
    cached_at: datetime | None = Field(None, description="When the matched entry was created")
    tokens_saved: int = Field(0, description="Tokens not spent thanks to the hit", ge=0)
    cost_saved_usd: float = Field(0.0, description="Cost not spent thanks to the hit", ge=0.0)
    lookup_time_ms: float = Field(..., description="Time taken for the lookup in milliseconds")


class StoreResponse(BaseModel):
    """Response DTO for a store operation.

    ``stored`` is False when the cache skipped the write; that is not an
    error from the caller's point of view.
    """

    stored: bool = Field(..., description="Whether an entry was written")
    key: str | None = Field(None, description="The storage key for the entry")
    message: str = Field(..., description="Human-readable status message")


class ClearModelResponse(BaseModel):
    """Response DTO for clearing one model's entries."""

    model: str = Field(..., description="The cleared completion model")
    deleted_count: int = Field(..., description="Number of entries removed", ge=0)


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., description="Total number of cached entries", ge=0)
    per_model_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Entry count per completion model",
    )
    oldest_entry: datetime | None = Field(None, description="Best-effort oldest entry time")
    newest_entry: datetime | None = Field(None, description="Best-effort newest entry time")
    cache_enabled: bool = Field(..., description="Whether caching is enabled")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_enabled: bool = Field(..., description="Whether caching is enabled")
    cache_healthy: bool = Field(..., description="Whether the store and embeddings are reachable")
