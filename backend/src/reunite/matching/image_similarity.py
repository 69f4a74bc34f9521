"""Image similarity over pre-computed embedding vectors.

Embeddings are produced at report-submission time by an
`ImageEmbeddingProviderPort`; this module only compares vectors.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

import numpy as np

from ..domain.matching.errors import DimensionMismatchError
from .ports import ItemProfile
from .utils import clamp, round_half_up

MAX_IMAGE_SCORE = 15


@dataclass
class SimilarImage:
    """One ranked hit of find_most_similar (score 0-100)."""
    id: UUID
    score: int


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine similarity clamped to [0, 1].

    Raises:
        DimensionMismatchError: If the vectors have different lengths
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(len(vec_a), len(vec_b))

    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)

    norm_product = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm_product == 0.0:
        return 0.0

    return clamp(float(np.dot(a, b)) / norm_product, 0.0, 1.0)


def image_score(lost: ItemProfile, found: ItemProfile) -> int:
    """Visual similarity score (0-15); 0 when either embedding is missing."""
    if not lost.image_embedding or not found.image_embedding:
        return 0

    similarity = cosine_similarity(lost.image_embedding, found.image_embedding)
    return int(clamp(round_half_up(similarity * MAX_IMAGE_SCORE), 0, MAX_IMAGE_SCORE))


def find_most_similar(
    query_embedding: Sequence[float],
    candidates: Sequence[Tuple[UUID, Optional[Sequence[float]]]],
    top_k: int = 10,
) -> List[SimilarImage]:
    """Rank candidate embeddings by similarity to the query.

    Candidates without an embedding are skipped. Ties keep input order.

    Args:
        query_embedding: Embedding to compare against
        candidates: (id, embedding) pairs
        top_k: Number of hits to return

    Returns:
        Up to top_k hits, best first, with 0-100 scores

    Raises:
        DimensionMismatchError: If a candidate embedding has a different length
    """
    hits = [
        SimilarImage(id=candidate_id, score=round_half_up(cosine_similarity(query_embedding, embedding) * 100))
        for candidate_id, embedding in candidates
        if embedding
    ]
    hits.sort(key=lambda hit: hit.score, reverse=True)
    return hits[:top_k]
