"""
Vector math for similarity ranking.

Cosine similarity is summed in index order with plain floats so results
are reproducible across runs and platforms.

Dependencies: math (stdlib), rag_backend.core.exceptions
System role: In-process similarity scoring for brute-force search
"""

import math
from collections.abc import Sequence

from rag_backend.core.exceptions import DimensionMismatchError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        float: Similarity in [-1, 1]; 0.0 when either vector has zero norm

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    norm_a = math.sqrt(norm_a)
    norm_b = math.sqrt(norm_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)
