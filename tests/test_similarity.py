"""
Tests for cosine similarity and best-match selection.
"""

import logging
import math

import pytest

from response_cache.errors import DimensionMismatch
from response_cache.similarity import cosine_similarity, find_best_match
from tests.conftest import make_entry


@pytest.mark.parametrize(
    "vector",
    [[1.0, 2.0, 3.0], [0.5, -0.25, 0.0, 4.0], [1e-8, 3e-8], [-7.0]],
)
def test_identical_vectors_are_fully_similar(vector):
    """A non-zero vector is perfectly similar to itself."""
    assert cosine_similarity(vector, vector) == pytest.approx(1.0)


def test_similarity_is_symmetric():
    a = [0.3, -1.2, 4.0, 0.7]
    b = [2.0, 0.1, -0.5, 1.5]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_orthogonal_and_opposite_vectors():
    """Scores are not assumed to be non-negative."""
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)


def test_magnitude_does_not_matter():
    assert cosine_similarity([1.0, 1.0], [10.0, 10.0]) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "a,b",
    [([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]), ([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]), ([0.0], [0.0])],
)
def test_zero_vector_scores_zero(a, b):
    """A degenerate embedding never matches anything."""
    score = cosine_similarity(a, b)
    assert score == 0.0
    assert not math.isnan(score)


def test_dimension_mismatch_is_reported():
    with pytest.raises(DimensionMismatch) as exc_info:
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    assert exc_info.value.left == 2
    assert exc_info.value.right == 3
    assert isinstance(exc_info.value, ValueError)


def test_find_best_match_misses_below_threshold():
    candidates = [
        ("k1", make_entry([0.0, 1.0, 0.0, 0.0])),
        ("k2", make_entry([0.5, 0.5, 0.5, 0.5])),
    ]
    assert find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.95) is None


def test_find_best_match_empty_candidates():
    assert find_best_match([], [1.0, 0.0], 0.5) is None


def test_find_best_match_picks_highest_score():
    candidates = [
        ("k1", make_entry([0.9, 0.3, 0.0, 0.0], response="close")),
        ("k2", make_entry([1.0, 0.01, 0.0, 0.0], response="closest")),
        ("k3", make_entry([0.8, 0.4, 0.0, 0.0], response="further")),
    ]
    match = find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.8)

    assert match is not None
    assert match.key == "k2"
    assert match.response == "closest"
    assert match.similarity == pytest.approx(cosine_similarity([1.0, 0.0, 0.0, 0.0], [1.0, 0.01, 0.0, 0.0]))


def test_find_best_match_tie_goes_to_first_candidate():
    candidates = [
        ("first", make_entry([2.0, 0.0, 0.0, 0.0], response="first")),
        ("second", make_entry([1.0, 0.0, 0.0, 0.0], response="second")),
    ]
    match = find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.9)

    assert match is not None
    assert match.key == "first"


def test_find_best_match_threshold_is_inclusive():
    candidates = [("k1", make_entry([1.0, 0.0, 0.0, 0.0]))]
    match = find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 1.0)

    assert match is not None
    assert match.similarity == 1.0


def test_find_best_match_skips_entries_without_embedding():
    candidates = [
        ("empty", make_entry([])),
        ("good", make_entry([1.0, 0.0, 0.0, 0.0])),
    ]
    match = find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.9)

    assert match is not None
    assert match.key == "good"


def test_find_best_match_skips_and_warns_on_dimension_mismatch(caplog):
    candidates = [
        ("stale", make_entry([1.0, 0.0, 0.0])),
        ("good", make_entry([0.97, 0.2, 0.0, 0.0])),
    ]
    with caplog.at_level(logging.WARNING, logger="response_cache.similarity"):
        match = find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.9)

    assert match is not None
    assert match.key == "good"
    assert "stale" in caplog.text
    assert "incompatible embedding" in caplog.text


def test_negative_scores_fall_below_zero_threshold():
    candidates = [("opposite", make_entry([-1.0, 0.0, 0.0, 0.0]))]
    assert find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.0) is None


@pytest.mark.parametrize(
    "a,b",
    [
        ([math.nan, 0.0, 0.0], [1.0, 0.0, 0.0]),
        ([1.0, 0.0, 0.0], [math.nan, math.nan, math.nan]),
        ([math.inf, 1.0], [1.0, 1.0]),
    ],
)
def test_non_finite_vectors_score_zero(a, b):
    assert cosine_similarity(a, b) == 0.0


def test_nan_query_embedding_never_matches(caplog):
    candidates = [("k1", make_entry([1.0, 0.0, 0.0, 0.0]))]
    with caplog.at_level(logging.WARNING, logger="response_cache.similarity"):
        match = find_best_match(candidates, [math.nan, 0.0, 0.0, 0.0], 0.95)

    assert match is None
    assert "non-finite" in caplog.text


def test_nan_stored_embedding_is_skipped():
    candidates = [
        ("corrupt", make_entry([math.nan, 0.0, 0.0, 0.0], response="corrupt")),
        ("good", make_entry([0.99, 0.1, 0.0, 0.0], response="good")),
    ]
    match = find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.95)

    assert match is not None
    assert match.key == "good"


def test_only_nan_stored_embedding_misses():
    candidates = [("corrupt", make_entry([math.nan, math.nan, math.nan, math.nan]))]
    assert find_best_match(candidates, [1.0, 0.0, 0.0, 0.0], 0.0) is None
