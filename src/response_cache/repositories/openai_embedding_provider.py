"""OpenAI embeddings API provider.

Calls ``POST {base_url}/embeddings``. Works with the OpenAI API and with
any server exposing the same endpoint (Azure-style gateways, vLLM, LiteLLM).

Default model: text-embedding-3-small at 1536 dimensions. The
text-embedding-3 family accepts a ``dimensions`` parameter and truncates
its output accordingly; older models ignore it and are sent without it.
"""

import logging
import time

import httpx

from response_cache.errors import EmbeddingFailure

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider:
    """OpenAI implementation of the EmbeddingProvider protocol.

    Example:
        ```python
        provider = OpenAIEmbeddingProvider.create(api_key="sk-...")
        embedding = await provider.encode("what is the capital of france?")
        print(len(embedding))  # 1536
        ```
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "text-embedding-3-small",
        dimension: int = 1536,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI embedding provider.

        Args:
            api_key: OpenAI API key.
            model_name: Embedding model name.
            dimension: Requested output dimension.
            base_url: API base URL, without the ``/embeddings`` suffix.
            timeout: Request timeout in seconds.
            client: Optional preconfigured HTTP client.
        """
        self._api_key = api_key
        self._model_name = model_name
        self._dimension = dimension
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @classmethod
    def create(
        cls,
        api_key: str,
        model_name: str = "text-embedding-3-small",
        dimension: int = 1536,
        base_url: str = "https://api.openai.com/v1",
    ) -> "OpenAIEmbeddingProvider":
        """Factory method to create OpenAIEmbeddingProvider with defaults."""
        return cls(api_key=api_key, model_name=model_name, dimension=dimension, base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model_name

    def _payload(self, text: str) -> dict:
        payload: dict = {"model": self._model_name, "input": text}
        if self._model_name.startswith("text-embedding-3"):
            payload["dimensions"] = self._dimension
        return payload

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Raises:
            EmbeddingFailure: If the request fails or the response is not
                in the expected format
        """
        start_time = time.perf_counter()
        try:
            response = await self.client.post(
                f"{self._base_url}/embeddings",
                json=self._payload(text),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise EmbeddingFailure(f"OpenAI embeddings request failed: {e}") from e
        except ValueError as e:
            raise EmbeddingFailure(f"OpenAI embeddings returned invalid JSON: {e}") from e

        try:
            embedding = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise EmbeddingFailure(f"Unexpected embeddings response format: {data!r:.200}") from e

        logger.debug(
            "Generated embedding model=%s dimensions=%d duration_ms=%.1f usage=%s",
            self._model_name,
            len(embedding),
            (time.perf_counter() - start_time) * 1000,
            data.get("usage"),
        )
        return embedding

    async def is_available(self) -> bool:
        try:
            await self.encode("test")
            return True
        except EmbeddingFailure:
            return False

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
