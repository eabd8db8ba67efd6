import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from response_cache.errors import ConfigurationError

DEFAULT_NAMESPACE = "semantic_cache"

# Provider -> (model, output dimension) used when EMBEDDING_MODEL/DIMENSIONS are unset
EMBEDDING_DEFAULTS = {
    "openai": ("text-embedding-3-small", 1536),
    "ollama": ("nomic-embed-text", 768),
    "local": ("all-MiniLM-L6-v2", 384),
}


@dataclass(frozen=True)
class CacheConfig:
    """Validated construction-time configuration for ``CacheManager``."""

    similarity_threshold: float = 0.95
    ttl_seconds: int = 3600
    max_results: int = 10
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    # Upper bound for a whole lookup or store, including every round-trip
    timeout_seconds: float = 5.0
    namespace: str = DEFAULT_NAMESPACE

    def __post_init__(self) -> None:
        """Reject invalid values before any cache can be built."""
        if not 0 <= self.similarity_threshold <= 1:
            raise ConfigurationError(
                f"similarity_threshold must be between 0 and 1, got {self.similarity_threshold}"
            )
        if self.ttl_seconds <= 0:
            raise ConfigurationError(f"ttl_seconds must be positive, got {self.ttl_seconds}")
        if self.max_results <= 0:
            raise ConfigurationError(f"max_results must be positive, got {self.max_results}")
        if self.embedding_dimensions <= 0:
            raise ConfigurationError(
                f"embedding_dimensions must be positive, got {self.embedding_dimensions}"
            )
        if not self.timeout_seconds > 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if not self.embedding_model:
            raise ConfigurationError("embedding_model must not be empty")
        if not self.namespace or ":" in self.namespace:
            raise ConfigurationError(
                f"namespace must be non-empty and contain no ':', got {self.namespace!r}"
            )


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_optional_int(name: str) -> int | None:
    if not os.getenv(name):
        return None
    return _env_int(name, "0")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_enabled: bool = True
    similarity_threshold: float = 0.95
    ttl_seconds: int = 3600
    max_results: int = 10
    timeout_seconds: float = 5.0

    # Redis
    redis_url: str | None = None
    redis_password: str | None = None

    # Embedding
    embedding_provider: str = "openai"  # or "ollama" or "local"
    # Default to the provider's own model and dimension when unset
    embedding_model: str | None = None
    embedding_dimensions: int | None = None
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    ollama_base_url: str = "http://localhost:11434"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.embedding_provider not in ("openai", "ollama", "local"):
            raise ConfigurationError(
                "EMBEDDING_PROVIDER must be one of ['openai', 'ollama', 'local'], "
                f"got {self.embedding_provider!r}"
            )

        default_model, default_dimensions = EMBEDDING_DEFAULTS[self.embedding_provider]
        if self.embedding_model is None:
            object.__setattr__(self, "embedding_model", default_model)
        if self.embedding_dimensions is None:
            object.__setattr__(self, "embedding_dimensions", default_dimensions)

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and a ``.env`` file)."""
        load_dotenv()
        return cls(
            cache_enabled=_env_bool("SEMANTIC_CACHE_ENABLED", "true"),
            similarity_threshold=_env_float("SEMANTIC_CACHE_THRESHOLD", "0.95"),
            ttl_seconds=_env_int("SEMANTIC_CACHE_TTL", "3600"),
            max_results=_env_int("SEMANTIC_CACHE_MAX_RESULTS", "10"),
            timeout_seconds=_env_float("SEMANTIC_CACHE_TIMEOUT", "5.0"),
            redis_url=os.getenv("REDIS_URL"),
            redis_password=os.getenv("REDIS_PASSWORD"),
            embedding_provider=os.getenv("EMBEDDING_PROVIDER", "openai").lower(),
            embedding_model=os.getenv("EMBEDDING_MODEL") or None,
            embedding_dimensions=_env_optional_int("EMBEDDING_DIMENSIONS"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=_env_int("API_PORT", "8000"),
            api_reload=_env_bool("API_RELOAD", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def missing_requirements(self) -> list[str]:
        """Names of settings the cache needs but that are not configured."""
        missing = []
        if not self.redis_url:
            missing.append("REDIS_URL")
        if self.embedding_provider == "openai" and not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing

    def cache_config(self) -> CacheConfig:
        """Build the validated cache configuration.

        Raises:
            ConfigurationError: If any cache value is out of range
        """
        return CacheConfig(
            similarity_threshold=self.similarity_threshold,
            ttl_seconds=self.ttl_seconds,
            max_results=self.max_results,
            embedding_model=self.embedding_model,
            embedding_dimensions=self.embedding_dimensions,
            timeout_seconds=self.timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
