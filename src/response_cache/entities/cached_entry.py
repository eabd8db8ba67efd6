"""Cached entry domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CachedEntry:
    """Domain entity for a cached query-response pair.

    Entries are immutable once written. The only mutations a cache ever
    performs are creating new entries and deleting existing ones.

    Attributes:
        query: Normalized (lowercased, trimmed) text of the original request
        response: The response previously produced by the completion model
        embedding: Embedding vector of the normalized query
        model: Completion model the response was generated for
        tokens_in: Prompt tokens spent producing the response
        tokens_out: Completion tokens spent producing the response
        cost_usd: Cost of producing the response
        created_at: When this entry was created
        metadata: Optional opaque key/value data
    """

    query: str
    response: str
    embedding: list[float]
    model: str
    tokens_in: int
    tokens_out: int
    cost_usd: float
    created_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)
