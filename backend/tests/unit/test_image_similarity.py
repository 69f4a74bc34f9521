"""Unit tests for embedding similarity"""

from uuid import uuid4

import pytest

from reunite.domain.matching.errors import DimensionMismatchError, ValidationError
from reunite.matching.image_similarity import cosine_similarity, find_most_similar, image_score


def test_identical_embeddings_score_max(make_profile):
    lost = make_profile("lost", image_embedding=[1.0, 0.0, 0.0])
    found = make_profile("found", image_embedding=[1.0, 0.0, 0.0])
    assert image_score(lost, found) == 15


def test_orthogonal_embeddings_score_zero(make_profile):
    lost = make_profile("lost", image_embedding=[1.0, 0.0, 0.0])
    found = make_profile("found", image_embedding=[0.0, 1.0, 0.0])
    assert image_score(lost, found) == 0


def test_missing_embedding_scores_zero(make_profile):
    lost = make_profile("lost", image_embedding=[1.0, 0.0, 0.0])
    found = make_profile("found")
    assert image_score(lost, found) == 0
    assert image_score(found, lost) == 0


def test_opposite_vectors_clamp_to_zero():
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == 0.0


def test_zero_vector_is_zero_similarity():
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_dimension_mismatch_raises(make_profile):
    with pytest.raises(DimensionMismatchError) as exc_info:
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    assert isinstance(exc_info.value, ValidationError)
    assert exc_info.value.len_a == 2

    lost = make_profile("lost", image_embedding=[1.0, 0.0])
    found = make_profile("found", image_embedding=[1.0, 0.0, 0.0])
    with pytest.raises(DimensionMismatchError):
        image_score(lost, found)


def test_find_most_similar_ranks_and_limits():
    exact, close, far, blank = uuid4(), uuid4(), uuid4(), uuid4()
    candidates = [
        (far, [0.0, 1.0]),
        (close, [1.0, 1.0]),
        (blank, None),
        (exact, [2.0, 0.0]),
    ]

    hits = find_most_similar([1.0, 0.0], candidates, top_k=2)

    assert [hit.id for hit in hits] == [exact, close]
    assert hits[0].score == 100
    assert hits[1].score == 71
