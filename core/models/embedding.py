"""Vector Manager Embedding Math - Similarity helpers over embedding vectors.

Vectors are plain lists of floats as returned by the embedding provider; the
helpers here enforce the equal-dimension rule for every comparison.
"""

from typing import Sequence

from ..exceptions import DimensionMismatchError
from ..types import Score


def _check_dims(a: Sequence[float], b: Sequence[float]) -> None:
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute the dot product of two vectors.

    Raises:
        DimensionMismatchError: If vectors have different dimensions
    """
    _check_dims(a, b)
    return sum(x * y for x, y in zip(a, b))


def magnitude(vector: Sequence[float]) -> float:
    """Compute the magnitude (L2 norm) of a vector."""
    return sum(x * x for x in vector) ** 0.5


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> Score:
    """Compute cosine similarity ``dot(a, b) / (|a| * |b|)``.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Cosine similarity value (-1 to 1); 0.0 when either vector is zero

    Raises:
        DimensionMismatchError: If vectors have different dimensions
    """
    dot_prod = dot_product(a, b)

    mag_a = magnitude(a)
    mag_b = magnitude(b)

    # Avoid division by zero
    if mag_a == 0 or mag_b == 0:
        return Score(0.0)

    return Score(dot_prod / (mag_a * mag_b))
