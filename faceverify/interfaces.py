"""Core interfaces and data structures for the face verification pipeline.

This module defines the data classes passed between pipeline stages and the
Protocols for the external collaborators (image codec, embedding model,
embedding store), so concrete implementations can be swapped in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np


@dataclass
class Region:
    """Candidate face bounding box on the edge map.

    Attributes:
        x: Left edge x-coordinate (pixels)
        y: Top edge y-coordinate (pixels)
        width: Box width in pixels, inclusive of both edge columns
        height: Box height in pixels, inclusive of both edge rows
        size: Number of grown pixels inside the box
        density: size / (width * height), in [0, 1]
        face_score: Combined face confidence, in [0, 1]
    """

    x: int
    y: int
    width: int
    height: int
    size: int
    density: float
    face_score: float = 0.0

    def __post_init__(self) -> None:
        """Validate region geometry after initialization."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Region width and height must be > 0, got {self.width}x{self.height}"
            )
        if not 0.0 <= self.density <= 1.0:
            raise ValueError(f"Region density must be in [0, 1], got {self.density}")
        if not 0.0 <= self.face_score <= 1.0:
            raise ValueError(f"Region face_score must be in [0, 1], got {self.face_score}")

    @property
    def area(self) -> int:
        """Get bounding box area in square pixels."""
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Get center point (x, y) as the midpoint of the extreme pixels."""
        return (self.x + (self.width - 1) / 2, self.y + (self.height - 1) / 2)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def __repr__(self) -> str:
        return (
            f"Region(x={self.x}, y={self.y}, w={self.width}, h={self.height}, "
            f"size={self.size}, density={self.density:.3f}, score={self.face_score:.3f})"
        )


@dataclass(frozen=True)
class PixelStats:
    """Mean and standard deviation of a greyscale sample buffer."""

    mean: float
    std: float


@dataclass(frozen=True)
class ImageMetadata:
    """Header information read by the image codec.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        format: Codec format name (e.g. 'jpeg', 'png', 'webp')
    """

    width: int
    height: int
    format: str


@dataclass(frozen=True)
class MatchResult:
    """Outcome of comparing two embeddings.

    Attributes:
        similarity: Similarity score in [-1, 1] (cosine) or [0, 1] (distances)
        is_match: True if similarity >= threshold
        threshold: Threshold used for the decision
        metric: Similarity metric name
    """

    similarity: float
    is_match: bool
    threshold: float
    metric: str = "cosine"

    def to_dict(self) -> dict:
        return {
            "similarity": round(self.similarity, 4),
            "isMatch": self.is_match,
            "threshold": self.threshold,
            "metric": self.metric,
        }


@runtime_checkable
class ImageCodec(Protocol):
    """Protocol for the image decode / resize / convolution service."""

    def decode_metadata(self, image_bytes: bytes) -> ImageMetadata:
        """Read width, height, and format without decoding pixels."""
        ...

    def resize_greyscale(self, image_bytes: bytes, width: int, height: int) -> np.ndarray:
        """Decode, resize, and convert to a greyscale uint8 array [height, width]."""
        ...

    def resize_cover_rgb(self, image_bytes: bytes, width: int, height: int) -> np.ndarray:
        """Decode and cover-resize to an RGB uint8 array [height, width, 3]."""
        ...

    def convolve3x3(self, grey: np.ndarray, kernel: Sequence[float]) -> np.ndarray:
        """Convolve a greyscale array with a row-major 3x3 kernel.

        Returns a uint8 array of the same shape, saturated to [0, 255].
        """
        ...


@runtime_checkable
class EmbeddingModel(Protocol):
    """Protocol for the neural embedding model.

    The model receives a float32 tensor of shape [1, 112, 112, 3] with
    values in [-1, 1] and returns the raw (unnormalized) feature vector.
    """

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        ...


@runtime_checkable
class EmbeddingStore(Protocol):
    """Key-value contract for persisted embeddings."""

    def get(self, user_id: str) -> Optional[List[float]]:
        """Return the stored embedding for user_id, or None."""
        ...

    def put(self, user_id: str, embedding: Sequence[float]) -> dict:
        """Store embedding for user_id and return a confirmation record."""
        ...
