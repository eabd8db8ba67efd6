"""Local sentence-transformers embedding provider.

Runs a sentence-transformers model in-process. No API calls required.
Encoding is CPU-bound, so it runs in a worker thread to keep the event
loop responsive.
"""

import asyncio
import logging
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from response_cache.errors import EmbeddingFailure

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider:
    """Local sentence-transformers implementation of EmbeddingProvider.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Default model: all-MiniLM-L6-v2 (384 dimensions)
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2") -> None:
        self._model_name = model_name
        self._model: SentenceTransformer | None = None
        self._dimension: int | None = None

    @classmethod
    def create(cls, model_name: str = "all-MiniLM-L6-v2") -> "LocalEmbeddingProvider":
        return cls(model_name=model_name)

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the embedding model."""
        if self._model is None:
            logger.info("Loading embedding model: %s", self._model_name)
            start_time = time.time()
            self._model = SentenceTransformer(self._model_name)
            logger.info("Model loaded in %.2fs", time.time() - start_time)
        return self._model

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        if self._dimension is None:
            # Get dimension by encoding a sample
            sample_embedding = self.model.encode(["test"], show_progress_bar=False)
            self._dimension = len(sample_embedding[0])
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model_name

    def _encode_sync(self, text: str) -> list[float]:
        embedding = self.model.encode(
            text,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        if isinstance(embedding, np.ndarray):
            if embedding.ndim == 1:
                return embedding.tolist()
            return embedding[0].tolist()
        return list(embedding)

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Raises:
            EmbeddingFailure: If the model cannot be loaded or fails to encode
        """
        try:
            return await asyncio.to_thread(self._encode_sync, text)
        except Exception as e:
            raise EmbeddingFailure(f"Local embedding failed ({self._model_name}): {e}") from e

    async def is_available(self) -> bool:
        try:
            await asyncio.to_thread(lambda: self.model)
            return True
        except Exception as e:
            logger.warning("Embedding model %s unavailable: %s", self._model_name, e)
            return False
