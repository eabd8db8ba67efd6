"""Cache match domain entity."""

from dataclasses import dataclass

from .cached_entry import CachedEntry


@dataclass(frozen=True)
class CacheMatch:
    """A cache hit: the best stored entry and how similar it was.

    Attributes:
        key: Storage key of the matched entry
        entry: The matched entry
        similarity: Cosine similarity between query and entry embeddings
    """

    key: str
    entry: CachedEntry
    similarity: float

    @property
    def response(self) -> str:
        return self.entry.response

    @property
    def tokens_saved(self) -> int:
        """Tokens not spent because the cached response was reused."""
        return self.entry.tokens_in + self.entry.tokens_out

    @property
    def cost_saved_usd(self) -> float:
        return self.entry.cost_usd
