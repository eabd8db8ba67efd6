"""
Tests for the storage key layout.
"""

from datetime import datetime, timezone

from response_cache.keys import CacheKey, build_key, model_prefix, new_entry_id, parse_key


def test_build_and_parse_key():
    key = build_key("semantic_cache", "gpt-4", "1714564800000-abc123")

    assert key == "semantic_cache:gpt-4:1714564800000-abc123"
    assert parse_key(key) == CacheKey("semantic_cache", "gpt-4", "1714564800000-abc123")


def test_model_names_may_contain_separator():
    key = build_key("semantic_cache", "llama3:8b", "1714564800000-abc123")
    parsed = parse_key(key)

    assert parsed is not None
    assert parsed.model == "llama3:8b"
    assert parsed.entry_id == "1714564800000-abc123"


def test_legacy_timestamp_only_ids_parse():
    parsed = parse_key("semantic_cache:gpt-4:1714564800000")

    assert parsed is not None
    assert parsed.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_created_at_is_none_for_opaque_ids():
    parsed = parse_key("semantic_cache:gpt-4:f47ac10b-58cc")

    assert parsed is not None
    assert parsed.created_at is None


def test_created_at_is_none_for_out_of_range_digit_ids():
    parsed = parse_key("semantic_cache:gpt-4:99999999999999999999")

    assert parsed is not None
    assert parsed.entry_id == "99999999999999999999"
    assert parsed.created_at is None


def test_parse_rejects_keys_outside_layout():
    assert parse_key("semantic_cache") is None
    assert parse_key("semantic_cache:gpt-4") is None
    assert parse_key("semantic_cache::123") is None


def test_model_prefix():
    assert model_prefix("semantic_cache", "gpt-4") == "semantic_cache:gpt-4:"
    assert model_prefix("semantic_cache") == "semantic_cache:"


def test_entry_ids_are_unique_and_carry_a_timestamp():
    ids = {new_entry_id() for _ in range(1000)}

    assert len(ids) == 1000
    for entry_id in ids:
        assert CacheKey("semantic_cache", "gpt-4", entry_id).created_at is not None
