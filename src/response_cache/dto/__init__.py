"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import LookupRequest, StoreRequest
from .responses import (
    CacheStatsResponse,
    ClearModelResponse,
    HealthCheckResponse,
    LookupResponse,
    StoreResponse,
)

__all__ = [
    "LookupRequest",
    "StoreRequest",
    "LookupResponse",
    "StoreResponse",
    "ClearModelResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
