"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .cache_manager import CacheManager, DisabledCache, SemanticCache, normalize_query

__all__ = [
    "CacheManager",
    "DisabledCache",
    "SemanticCache",
    "normalize_query",
]
