"""Unit tests for embedding vector math."""

from __future__ import annotations

import math

import numpy as np
import pytest

from faceverify.errors import (
    DimensionMismatchError,
    EmbeddingFormatError,
    EmptyVectorError,
    ZeroVectorError,
)
from faceverify.vector_math import (
    all_similarities,
    as_vector,
    cosine_similarity,
    distance_to_similarity,
    dot,
    euclidean_distance,
    l2_normalize,
    magnitude,
    manhattan_distance,
    max_euclidean_distance,
    max_manhattan_distance,
)


@pytest.fixture
def random_pair():
    """Two random 512-D vectors."""
    rng = np.random.default_rng(42)
    return rng.normal(size=512), rng.normal(size=512)


def test_dot_and_magnitude():
    assert dot([1, 2, 3], [4, 5, 6]) == pytest.approx(32.0)
    assert magnitude([3, 4]) == pytest.approx(5.0)


def test_cosine_self_similarity(random_pair):
    a, _ = random_pair

    assert cosine_similarity(a, a) == pytest.approx(1.0)


def test_cosine_symmetric(random_pair):
    a, b = random_pair

    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_opposite_and_orthogonal():
    assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)


def test_cosine_scale_invariant():
    assert cosine_similarity([1, 2, 3], [10, 20, 30]) == pytest.approx(1.0)


def test_cosine_in_range(random_pair):
    a, b = random_pair

    assert -1.0 <= cosine_similarity(a, b) <= 1.0


def test_cosine_dimension_mismatch():
    with pytest.raises(DimensionMismatchError) as exc_info:
        cosine_similarity([1, 2, 3], [1, 2])

    assert exc_info.value.details == {"len_a": 3, "len_b": 2}


def test_cosine_empty():
    with pytest.raises(EmptyVectorError):
        cosine_similarity([], [])


def test_cosine_zero_vector():
    with pytest.raises(ZeroVectorError):
        cosine_similarity([0, 0, 0], [1, 2, 3])


def test_distances(random_pair):
    a, b = random_pair

    assert euclidean_distance(a, a) == 0.0
    assert manhattan_distance(a, a) == 0.0
    assert euclidean_distance(a, b) == pytest.approx(euclidean_distance(b, a))
    assert euclidean_distance([0, 0], [3, 4]) == pytest.approx(5.0)
    assert manhattan_distance([0, 0], [3, -4]) == pytest.approx(7.0)


def test_distance_mismatch():
    with pytest.raises(DimensionMismatchError):
        euclidean_distance([1, 2], [1])
    with pytest.raises(DimensionMismatchError):
        manhattan_distance([1], [1, 2])


def test_distance_to_similarity():
    assert max_euclidean_distance(2) == pytest.approx(2.0)
    assert max_manhattan_distance(4) == pytest.approx(8.0)
    assert distance_to_similarity(0.0, 2.0) == 1.0
    assert distance_to_similarity(1.0, 2.0) == pytest.approx(0.5)
    assert distance_to_similarity(3.0, 2.0) == 0.0


def test_l2_normalize_unit_norm(random_pair):
    a, _ = random_pair

    normalized = l2_normalize(a)

    assert np.linalg.norm(normalized) == pytest.approx(1.0)
    assert cosine_similarity(normalized, a) == pytest.approx(1.0)


def test_l2_normalize_idempotent(random_pair):
    a, _ = random_pair
    once = l2_normalize(a)

    np.testing.assert_allclose(l2_normalize(once), once, atol=1e-12)


def test_l2_normalize_known_values():
    np.testing.assert_allclose(l2_normalize([3, 4]), [0.6, 0.8])


def test_l2_normalize_errors():
    with pytest.raises(EmptyVectorError):
        l2_normalize([])
    with pytest.raises(ZeroVectorError):
        l2_normalize([0.0, 0.0])


def test_as_vector_rejects_bad_input():
    with pytest.raises(EmbeddingFormatError):
        as_vector([1, "x", 3])
    with pytest.raises(EmbeddingFormatError):
        as_vector([[1, 2], [3, 4]])
    with pytest.raises(EmbeddingFormatError) as exc_info:
        as_vector([1.0, math.nan, 2.0])

    assert exc_info.value.details["index"] == 1


def test_all_similarities_identical():
    """Test the full report for identical unit vectors."""
    v = l2_normalize([1, 2, 3, 4])

    report = all_similarities(v, v)

    assert report.cosine == pytest.approx(1.0)
    assert report.euclidean_distance == pytest.approx(0.0)
    assert report.euclidean_similarity == pytest.approx(1.0)
    assert report.manhattan_similarity == pytest.approx(1.0)
    assert set(report.to_dict()) == {"cosine", "euclidean", "manhattan"}


def test_cosine_extreme_magnitudes():
    """Test that huge and tiny finite values neither overflow nor underflow."""
    huge = [1e200] * 64
    tiny = [1e-200] * 64

    assert cosine_similarity(huge, [-1e200] * 64) == pytest.approx(-1.0)
    assert cosine_similarity(huge, huge) == pytest.approx(1.0)
    assert cosine_similarity(tiny, tiny) == pytest.approx(1.0)
    assert cosine_similarity(huge, tiny) == pytest.approx(1.0)


def test_l2_normalize_extreme_magnitudes():
    for value in (1e200, -1e200, 1e-200):
        normalized = l2_normalize([value] * 64)

        assert np.linalg.norm(normalized) == pytest.approx(1.0)
        assert np.all(np.sign(normalized) == np.sign(value))
