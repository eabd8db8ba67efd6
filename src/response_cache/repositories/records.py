"""Persisted record format for cache entries.

Entries are stored as JSON objects with camelCase field names::

    {"query": ..., "response": ..., "embedding": [...], "model": ...,
     "tokensIn": 8, "tokensOut": 1, "costUsd": 0.0001,
     "createdAt": "2024-05-01T12:00:00Z", "metadata": {...}}

Every store implementation goes through ``encode_entry``/``decode_entry``
so records stay readable across backends.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from response_cache.entities import CachedEntry
from response_cache.errors import MalformedEntry


class EntryRecord(BaseModel):
    """Wire representation of a ``CachedEntry``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: str
    response: str
    embedding: list[float] = Field(..., min_length=1)
    model: str
    tokens_in: int = Field(0, alias="tokensIn", ge=0)
    tokens_out: int = Field(0, alias="tokensOut", ge=0)
    cost_usd: float = Field(0.0, alias="costUsd", ge=0.0)
    created_at: datetime = Field(..., alias="createdAt")
    metadata: dict[str, Any] | None = None


def encode_entry(entry: CachedEntry) -> str:
    record = EntryRecord(
        query=entry.query,
        response=entry.response,
        embedding=entry.embedding,
        model=entry.model,
        tokens_in=entry.tokens_in,
        tokens_out=entry.tokens_out,
        cost_usd=entry.cost_usd,
        created_at=entry.created_at,
        metadata=entry.metadata or None,
    )
    return record.model_dump_json(by_alias=True, exclude_none=True)


def decode_entry(key: str, raw: str | bytes) -> CachedEntry:
    """Decode a stored record.

    Args:
        key: Storage key the record was read from (for error reporting)
        raw: The JSON payload

    Returns:
        The decoded entry

    Raises:
        MalformedEntry: If the payload is not a valid record
    """
    try:
        record = EntryRecord.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedEntry(key, f"{e.error_count()} validation error(s)") from e

    return CachedEntry(
        query=record.query,
        response=record.response,
        embedding=record.embedding,
        model=record.model,
        tokens_in=record.tokens_in,
        tokens_out=record.tokens_out,
        cost_usd=record.cost_usd,
        created_at=record.created_at,
        metadata=record.metadata or {},
    )
