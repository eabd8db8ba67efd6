"""
Tests for cache configuration and environment settings.
"""

import math

import pytest

from response_cache.config import CacheConfig, Settings
from response_cache.errors import ConfigurationError


def test_cache_config_defaults():
    config = CacheConfig()
    assert config.similarity_threshold == 0.95
    assert config.ttl_seconds == 3600
    assert config.max_results == 10
    assert config.embedding_model == "text-embedding-3-small"
    assert config.embedding_dimensions == 1536
    assert config.namespace == "semantic_cache"


@pytest.mark.parametrize("threshold", [0.0, 0.5, 1.0])
def test_threshold_bounds_are_inclusive(threshold):
    assert CacheConfig(similarity_threshold=threshold).similarity_threshold == threshold


@pytest.mark.parametrize(
    "overrides",
    [
        {"similarity_threshold": -0.01},
        {"similarity_threshold": 1.01},
        {"similarity_threshold": math.nan},
        {"ttl_seconds": 0},
        {"ttl_seconds": -60},
        {"max_results": 0},
        {"embedding_dimensions": 0},
        {"timeout_seconds": 0},
        {"embedding_model": ""},
        {"namespace": ""},
        {"namespace": "semantic:cache"},
    ],
)
def test_invalid_config_is_rejected_at_construction(overrides):
    with pytest.raises(ConfigurationError):
        CacheConfig(**overrides)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        CacheConfig(ttl_seconds=0)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SEMANTIC_CACHE_THRESHOLD", "0.9")
    monkeypatch.setenv("SEMANTIC_CACHE_TTL", "600")
    monkeypatch.setenv("SEMANTIC_CACHE_MAX_RESULTS", "25")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")
    monkeypatch.setenv("EMBEDDING_PROVIDER", "Ollama")
    monkeypatch.setenv("EMBEDDING_MODEL", "nomic-embed-text")
    monkeypatch.setenv("EMBEDDING_DIMENSIONS", "768")
    monkeypatch.setenv("SEMANTIC_CACHE_ENABLED", "yes")

    settings = Settings.from_env()
    config = settings.cache_config()

    assert settings.cache_enabled is True
    assert settings.redis_url == "redis://cache:6379/1"
    assert settings.embedding_provider == "ollama"
    assert config.similarity_threshold == 0.9
    assert config.ttl_seconds == 600
    assert config.max_results == 25
    assert config.embedding_model == "nomic-embed-text"
    assert config.embedding_dimensions == 768
    assert settings.missing_requirements == []


def test_settings_reject_unparseable_numbers(monkeypatch):
    monkeypatch.setenv("SEMANTIC_CACHE_TTL", "one hour")
    with pytest.raises(ConfigurationError, match="SEMANTIC_CACHE_TTL"):
        Settings.from_env()


def test_settings_reject_unknown_provider():
    with pytest.raises(ConfigurationError, match="EMBEDDING_PROVIDER"):
        Settings(embedding_provider="cohere")


def test_out_of_range_values_fail_when_building_cache_config():
    settings = Settings(similarity_threshold=1.5)
    with pytest.raises(ConfigurationError):
        settings.cache_config()


def test_missing_requirements():
    assert Settings().missing_requirements == ["REDIS_URL", "OPENAI_API_KEY"]
    assert Settings(redis_url="redis://x", embedding_provider="local").missing_requirements == []


@pytest.mark.parametrize(
    "provider, model, dimensions",
    [
        ("openai", "text-embedding-3-small", 1536),
        ("ollama", "nomic-embed-text", 768),
        ("local", "all-MiniLM-L6-v2", 384),
    ],
)
def test_embedding_defaults_follow_provider(provider, model, dimensions):
    settings = Settings(embedding_provider=provider)
    assert settings.embedding_model == model
    assert settings.embedding_dimensions == dimensions
    assert settings.cache_config().embedding_dimensions == dimensions


def test_explicit_embedding_settings_override_provider_defaults():
    settings = Settings(embedding_provider="ollama", embedding_model="mxbai-embed-large", embedding_dimensions=1024)
    assert settings.embedding_model == "mxbai-embed-large"
    assert settings.embedding_dimensions == 1024


def test_settings_from_env_uses_provider_defaults(monkeypatch):
    monkeypatch.setenv("EMBEDDING_PROVIDER", "ollama")
    monkeypatch.delenv("EMBEDDING_MODEL", raising=False)
    monkeypatch.delenv("EMBEDDING_DIMENSIONS", raising=False)

    config = Settings.from_env().cache_config()

    assert config.embedding_model == "nomic-embed-text"
    assert config.embedding_dimensions == 768
