"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_match import CacheMatch
from .cache_stats import CacheStats
from .cached_entry import CachedEntry

__all__ = ["CachedEntry", "CacheMatch", "CacheStats"]
