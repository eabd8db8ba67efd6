"""Vector comparison for semantic matching.

This is a brute-force scan over the candidates the caller supplies. It is
meant for small per-model candidate sets, not as a vector index.
"""

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from response_cache.entities import CacheMatch, CachedEntry
from response_cache.errors import DimensionMismatch

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Cosine similarity = (A · B) / (||A|| * ||B||), in [-1, 1].

    Args:
        a: First vector
        b: Second vector

    Returns:
        The similarity, or 0.0 if either vector has zero magnitude or
        contains non-finite values

    Raises:
        DimensionMismatch: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    magnitude = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if magnitude == 0 or not np.isfinite(magnitude):
        return 0.0

    score = float(np.dot(va, vb) / magnitude)
    if not np.isfinite(score):
        return 0.0
    return float(np.clip(score, -1.0, 1.0))


def find_best_match(
    candidates: Iterable[tuple[str, CachedEntry]],
    query_embedding: Sequence[float],
    threshold: float,
) -> CacheMatch | None:
    """Pick the most similar candidate at or above ``threshold``.

    Candidates are scored in the order given. A later candidate only
    replaces the current best if it scores strictly higher, so ties go to
    the first one seen. Candidates without an embedding are skipped, as are
    candidates whose embedding length differs from the query's. A query or
    candidate embedding with NaN or infinite values never matches.

    Args:
        candidates: ``(key, entry)`` pairs, typically in store listing order
        query_embedding: Embedding of the normalized query
        threshold: Minimum similarity for a candidate to be eligible

    Returns:
        The best eligible match, or None
    """
    if not np.all(np.isfinite(query_embedding)):
        logger.warning("Query embedding has non-finite values, nothing can match")
        return None

    best: CacheMatch | None = None

    for key, entry in candidates:
        if not entry.embedding:
            logger.debug("Skipping cache entry without embedding: %s", key)
            continue
        if not np.all(np.isfinite(entry.embedding)):
            logger.warning("Skipping cache entry %s with non-finite embedding values", key)
            continue

        try:
            score = cosine_similarity(query_embedding, entry.embedding)
        except DimensionMismatch as e:
            logger.warning(
                "Skipping cache entry %s with incompatible embedding (%s); "
                "the embedding model may have changed without clearing the cache",
                key,
                e,
            )
            continue

        if not score >= threshold:
            continue
        if best is None or score > best.similarity:
            best = CacheMatch(key=key, entry=entry, similarity=score)

    return best
