"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class LookupRequest(BaseModel):
    """Request DTO for a semantic lookup."""

    query: str = Field(..., description="The incoming request text", min_length=1)
    model: str = Field(..., description="Completion model the request targets", min_length=1)


class StoreRequest(BaseModel):
    """Request DTO for caching a generated response."""

    query: str = Field(..., description="The original request text", min_length=1)
    response: str = Field(..., description="The generated response to cache", min_length=1)
    model: str = Field(..., description="Completion model that produced the response", min_length=1)
    tokens_in: int = Field(0, description="Prompt tokens used", ge=0)
    tokens_out: int = Field(0, description="Completion tokens used", ge=0)
    cost_usd: float = Field(0.0, description="Cost of the completion in USD", ge=0.0)
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Optional metadata stored with the entry",
    )
