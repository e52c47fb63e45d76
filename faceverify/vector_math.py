"""Vector math for comparing face embeddings.

Dot product, magnitude, cosine similarity, Euclidean and Manhattan
distances, and L2 normalization. Inputs may be any numeric sequence or
numpy array; everything is computed in float64.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from faceverify.errors import (
    DimensionMismatchError,
    EmbeddingFormatError,
    EmptyVectorError,
    ZeroVectorError,
)

VectorLike = Union[Sequence[float], np.ndarray]


def as_vector(values: VectorLike) -> np.ndarray:
    """Convert a numeric sequence to a 1-D float64 array.

    Raises:
        EmbeddingFormatError: If the input is not a flat sequence of finite numbers.
    """
    try:
        vec = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise EmbeddingFormatError(f"Invalid vector elements: {e}") from e

    if vec.ndim != 1:
        raise EmbeddingFormatError(f"Expected a flat vector, got shape {vec.shape}")

    if not np.all(np.isfinite(vec)):
        index = int(np.argmin(np.isfinite(vec)))
        raise EmbeddingFormatError(
            f"Invalid vector element at index {index}. Expected finite numbers.",
            index=index,
        )
    return vec


def _pair(a: VectorLike, b: VectorLike) -> Tuple[np.ndarray, np.ndarray]:
    """Validate two vectors for a pairwise operation."""
    vec_a, vec_b = as_vector(a), as_vector(b)

    if vec_a.size != vec_b.size:
        raise DimensionMismatchError(
            f"Vector dimensions must match. A: {vec_a.size}, B: {vec_b.size}",
            len_a=int(vec_a.size),
            len_b=int(vec_b.size),
        )
    if vec_a.size == 0:
        raise EmptyVectorError("Vectors cannot be empty")

    return vec_a, vec_b


def _unit_scaled(vec: np.ndarray) -> Optional[np.ndarray]:
    """Divide by the largest absolute element, or return None for a zero vector.

    Keeps norms and dot products of very large or very small finite values
    away from float64 overflow and underflow.
    """
    peak = float(np.max(np.abs(vec)))
    if peak == 0.0:
        return None
    return vec / peak


def dot(a: VectorLike, b: VectorLike) -> float:
    """Inner product of two equal-length vectors."""
    vec_a, vec_b = _pair(a, b)
    return float(np.dot(vec_a, vec_b))


def magnitude(a: VectorLike) -> float:
    """Euclidean norm of a vector."""
    return float(np.linalg.norm(as_vector(a)))


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Compute cosine similarity between two vectors.

    Args:
        a: First vector, shape [D]
        b: Second vector, shape [D]

    Returns:
        Cosine similarity clamped to [-1, 1]. Higher = more similar.

    Raises:
        DimensionMismatchError: If lengths differ.
        EmptyVectorError: If the vectors are empty.
        ZeroVectorError: If either vector has zero magnitude.
        EmbeddingFormatError: If the result is not a finite number.

    Example:
        >>> sim = cosine_similarity(embedding1, embedding2)
        >>> if sim >= 0.6:
        ...     print("Same person")
    """
    vec_a, vec_b = _pair(a, b)

    # Cosine is scale-invariant, so each vector can be rescaled freely
    scaled_a = _unit_scaled(vec_a)
    scaled_b = _unit_scaled(vec_b)
    if scaled_a is None or scaled_b is None:
        raise ZeroVectorError(
            "Cannot calculate similarity for zero vectors",
            magnitude_a=0.0 if scaled_a is None else magnitude(vec_a),
            magnitude_b=0.0 if scaled_b is None else magnitude(vec_b),
        )

    mag_a = float(np.linalg.norm(scaled_a))
    mag_b = float(np.linalg.norm(scaled_b))
    similarity = float(np.dot(scaled_a, scaled_b)) / (mag_a * mag_b)

    if not np.isfinite(similarity):
        raise EmbeddingFormatError(f"Similarity is not a finite number: {similarity}")

    # Clamp to valid range (numerical stability)
    return max(-1.0, min(1.0, similarity))


def euclidean_distance(a: VectorLike, b: VectorLike) -> float:
    """Straight-line (L2) distance between two equal-length vectors."""
    vec_a, vec_b = _pair(a, b)
    return float(np.sqrt(np.sum(np.square(vec_a - vec_b))))


def manhattan_distance(a: VectorLike, b: VectorLike) -> float:
    """Sum of absolute element differences (L1) between two equal-length vectors."""
    vec_a, vec_b = _pair(a, b)
    return float(np.sum(np.abs(vec_a - vec_b)))


def max_euclidean_distance(dimension: int) -> float:
    """Upper bound used to scale Euclidean distance for unit vectors."""
    return math.sqrt(2 * dimension)


def max_manhattan_distance(dimension: int) -> float:
    """Upper bound used to scale Manhattan distance for unit vectors."""
    return 2.0 * dimension


def distance_to_similarity(distance: float, max_distance: float) -> float:
    """Map a distance to a [0, 1] similarity (1 = identical)."""
    return max(0.0, 1.0 - distance / max_distance)


def l2_normalize(vec: VectorLike) -> np.ndarray:
    """L2-normalize a vector.

    Args:
        vec: Vector to normalize, shape [D]

    Returns:
        Unit-norm float64 vector with the same direction. Normalizing an
        already unit vector returns it unchanged within rounding.

    Raises:
        EmptyVectorError: If the vector is empty.
        ZeroVectorError: If the vector has zero magnitude.

    Example:
        >>> normalized = l2_normalize(embedding)
        >>> assert abs(np.linalg.norm(normalized) - 1.0) < 1e-9
    """
    arr = as_vector(vec)
    if arr.size == 0:
        raise EmptyVectorError("Vector cannot be empty")

    scaled = _unit_scaled(arr)
    if scaled is None:
        raise ZeroVectorError("Cannot normalize zero vector")

    return scaled / float(np.linalg.norm(scaled))


@dataclass(frozen=True)
class SimilarityReport:
    """All similarity metrics for one vector pair.

    Distance-based similarities assume unit-normalized inputs.
    """

    cosine: float
    euclidean_distance: float
    euclidean_similarity: float
    manhattan_distance: float
    manhattan_similarity: float

    def to_dict(self) -> dict:
        return {
            "cosine": self.cosine,
            "euclidean": {
                "distance": self.euclidean_distance,
                "similarity": self.euclidean_similarity,
            },
            "manhattan": {
                "distance": self.manhattan_distance,
                "similarity": self.manhattan_similarity,
            },
        }


def all_similarities(a: VectorLike, b: VectorLike) -> SimilarityReport:
    """Compute cosine, Euclidean, and Manhattan metrics for a vector pair."""
    cosine = cosine_similarity(a, b)
    euclidean = euclidean_distance(a, b)
    manhattan = manhattan_distance(a, b)
    dimension = len(as_vector(a))

    return SimilarityReport(
        cosine=cosine,
        euclidean_distance=euclidean,
        euclidean_similarity=distance_to_similarity(euclidean, max_euclidean_distance(dimension)),
        manhattan_distance=manhattan,
        manhattan_similarity=distance_to_similarity(manhattan, max_manhattan_distance(dimension)),
    )
