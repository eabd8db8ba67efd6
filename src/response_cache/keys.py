"""Storage key layout: ``<namespace>:<model>:<id>``.

The id is ``<epoch-millis>-<random hex>`` so two writes in the same
millisecond never collide, while ids still sort by creation time. Model
names may themselves contain ``:`` (``llama3:8b``), so keys are split on
the first and last separator only.
"""

import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

SEPARATOR = ":"


@dataclass(frozen=True)
class CacheKey:
    namespace: str
    model: str
    entry_id: str

    def __str__(self) -> str:
        return SEPARATOR.join((self.namespace, self.model, self.entry_id))

    @property
    def created_at(self) -> datetime | None:
        """Creation time encoded in the id, if the id carries one."""
        millis, _, _ = self.entry_id.partition("-")
        if not millis.isdigit():
            return None
        try:
            return datetime.fromtimestamp(int(millis) / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            # All digits but not a plausible epoch-millis value
            return None


def new_entry_id() -> str:
    return f"{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:16]}"


def build_key(namespace: str, model: str, entry_id: str | None = None) -> str:
    return str(CacheKey(namespace, model, entry_id or new_entry_id()))


def model_prefix(namespace: str, model: str | None = None) -> str:
    """Prefix that enumerates one model's keys, or every key in the namespace."""
    if model is None:
        return f"{namespace}{SEPARATOR}"
    return f"{namespace}{SEPARATOR}{model}{SEPARATOR}"


def parse_key(key: str) -> CacheKey | None:
    """Split a storage key, returning None if it does not follow the layout."""
    namespace, sep, rest = key.partition(SEPARATOR)
    model, sep2, entry_id = rest.rpartition(SEPARATOR)
    if not sep or not sep2 or not namespace or not model or not entry_id:
        return None
    return CacheKey(namespace, model, entry_id)
