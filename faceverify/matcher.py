"""Embedding matching and stored-embedding parsing.

This module decides whether two face embeddings belong to the same person
and validates embeddings read back from the embedding store.
"""

from __future__ import annotations

import json
import math
import numbers
from typing import Any, List

import numpy as np

from faceverify.errors import EmbeddingFormatError
from faceverify.interfaces import MatchResult
from faceverify.logging_config import get_logger
from faceverify.vector_math import (
    VectorLike,
    cosine_similarity,
    distance_to_similarity,
    euclidean_distance,
    manhattan_distance,
    max_euclidean_distance,
    max_manhattan_distance,
)

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 0.6
SUPPORTED_METRICS = ("cosine", "euclidean", "manhattan")

MIN_EMBEDDING_DIM = 64
MAX_EMBEDDING_DIM = 2048


def validate_threshold(threshold: float) -> float:
    """Check that a match threshold lies in [0, 1].

    Raises:
        ValueError: If threshold is not a number in range.
    """
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise ValueError(f"Threshold must be a number, got {type(threshold).__name__}")
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"Threshold must be in [0, 1], got {threshold}")
    return float(threshold)


def similarity(a: VectorLike, b: VectorLike, metric: str = "cosine") -> float:
    """Compute the similarity of two embeddings under the given metric.

    Cosine similarity is in [-1, 1]. Euclidean and Manhattan distances are
    mapped to [0, 1] assuming unit-normalized inputs.

    Raises:
        ValueError: If the metric is unsupported.
    """
    metric = metric.lower()
    if metric == "cosine":
        return cosine_similarity(a, b)
    if metric == "euclidean":
        return distance_to_similarity(euclidean_distance(a, b), max_euclidean_distance(len(a)))
    if metric == "manhattan":
        return distance_to_similarity(manhattan_distance(a, b), max_manhattan_distance(len(a)))
    raise ValueError(f"Unsupported similarity metric: {metric}. Use one of {SUPPORTED_METRICS}")


def compare(
    a: VectorLike,
    b: VectorLike,
    threshold: float = DEFAULT_THRESHOLD,
    metric: str = "cosine",
) -> MatchResult:
    """Decide whether two embeddings represent the same person.

    Args:
        a: First embedding
        b: Second embedding, same length as ``a``
        threshold: Minimum similarity for a match, in [0, 1]
        metric: 'cosine', 'euclidean', or 'manhattan'

    Returns:
        MatchResult with ``is_match = similarity >= threshold``.

    Raises:
        DimensionMismatchError: If lengths differ.
        EmptyVectorError / ZeroVectorError: For degenerate vectors.
        ValueError: For an out-of-range threshold or unknown metric.

    Example:
        >>> result = compare(stored, query, threshold=0.6)
        >>> print(f"match={result.is_match} similarity={result.similarity:.4f}")
    """
    threshold = validate_threshold(threshold)
    score = similarity(a, b, metric)
    result = MatchResult(
        similarity=score,
        is_match=score >= threshold,
        threshold=threshold,
        metric=metric.lower(),
    )

    logger.debug(
        f"Similarity: {score:.4f}, Threshold: {threshold}, Match: {result.is_match}"
    )
    return result


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def decode_embedding(raw: Any) -> List[float]:
    """Decode a stored embedding from text or an already-decoded sequence.

    Text (``str`` or ``bytes``) is parsed as JSON. Lists, tuples and 1-D
    numpy arrays are accepted as they are. Every element must be a finite
    real number; booleans and numeric strings are rejected.

    Raises:
        EmbeddingFormatError: If the input cannot be decoded or has
            non-numeric elements.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")

    if isinstance(raw, str):
        try:
            values = json.loads(raw)
        except json.JSONDecodeError as e:
            raise EmbeddingFormatError(f"Invalid embedding format: {e.msg}") from e
        except RecursionError as e:
            raise EmbeddingFormatError("Invalid embedding format: nesting too deep") from e
    elif isinstance(raw, np.ndarray):
        if raw.ndim != 1:
            raise EmbeddingFormatError(f"Expected a 1-D embedding, got shape {raw.shape}")
        values = raw.tolist()
    elif isinstance(raw, (list, tuple)):
        values = list(raw)
    else:
        raise EmbeddingFormatError(
            f"Invalid embedding format: unsupported type {type(raw).__name__}"
        )

    if not isinstance(values, list):
        raise EmbeddingFormatError("Parsed embedding is not an array")

    for index, value in enumerate(values):
        if not _is_finite_number(value):
            raise EmbeddingFormatError(
                f"Embedding contains non-numeric value at index {index}",
                index=index,
                value=repr(value),
            )

    return [float(v) for v in values]


def parse_stored_embedding(
    raw: Any,
    min_dim: int = MIN_EMBEDDING_DIM,
    max_dim: int = MAX_EMBEDDING_DIM,
) -> List[float]:
    """Decode and validate an embedding read back from the store.

    Args:
        raw: JSON text, bytes, list, tuple, or 1-D numpy array
        min_dim: Minimum accepted length
        max_dim: Maximum accepted length

    Returns:
        Embedding as a list of floats.

    Raises:
        EmbeddingFormatError: If decoding fails, an element is not a finite
            number, or the length is outside [min_dim, max_dim].

    Example:
        >>> parse_stored_embedding("[1, 2, 3]", min_dim=1)
        [1.0, 2.0, 3.0]
    """
    embedding = decode_embedding(raw)

    if not min_dim <= len(embedding) <= max_dim:
        raise EmbeddingFormatError(
            f"Unusual embedding size: {len(embedding)}. "
            f"Expected between {min_dim}-{max_dim} dimensions.",
            length=len(embedding),
        )

    logger.debug(f"Parsed {len(embedding)}D embedding")
    return embedding
