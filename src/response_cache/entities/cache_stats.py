"""Cache statistics domain entity."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of what is currently stored.

    ``oldest_entry`` and ``newest_entry`` are best-effort: they are derived
    from key ids and are ``None`` when no key carries a timestamp.
    """

    total_entries: int = 0
    per_model_counts: dict[str, int] = field(default_factory=dict)
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None
