"""Cosine similarity between embedding vectors."""

from collections.abc import Sequence

import numpy as np

from src.retrieval.errors import DimensionMismatch


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1].

    Raises DimensionMismatch if the vectors differ in length. Returns 0.0
    when either vector has zero norm, including two zero vectors.
    """
    if len(vec1) != len(vec2):
        raise DimensionMismatch(expected=len(vec1), actual=len(vec2))

    a = np.asarray(vec1, dtype=np.float64)
    b = np.asarray(vec2, dtype=np.float64)

    norm1 = float(np.linalg.norm(a))
    norm2 = float(np.linalg.norm(b))
    if norm1 == 0.0 or norm2 == 0.0:
        return 0.0

    similarity = float(np.dot(a, b)) / (norm1 * norm2)
    # Rounding can push parallel vectors a hair past the bounds
    return max(-1.0, min(1.0, similarity))


class VectorScorer:
    """Scores chunk embeddings against a query embedding."""

    def similarity(self, query_embedding: Sequence[float], chunk_embedding: Sequence[float]) -> float:
        return cosine_similarity(query_embedding, chunk_embedding)
