"""Face verification service.

This module provides the service that runs the full verification pipeline
on raw image bytes:

1. Quality gate (format, resolution, aspect ratio, file size)
2. Lighting check on a 224x224 greyscale downsample
3. Blur check on a 300x300 greyscale downsample
4. Edge-based face locator on a 400x400 edge map
5. 112x112 RGB cover crop -> embedding model -> L2 normalization
6. Similarity decision against a stored embedding

Every stage raises on failure and the error propagates unchanged; the
service keeps no state between calls beyond its frozen configuration.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Any, List, Optional

import numpy as np

from faceverify.blur import validate_sharpness
from faceverify.config import PipelineConfig
from faceverify.detector import build_edge_map, locate_face
from faceverify.errors import (
    EmptyVectorError,
    ModelNotLoadedError,
    UserNotFoundError,
    ValidationError,
)
from faceverify.interfaces import (
    EmbeddingModel,
    EmbeddingStore,
    ImageCodec,
    ImageMetadata,
    MatchResult,
    PixelStats,
    Region,
)
from faceverify.lighting import validate_lighting
from faceverify.logging_config import get_logger
from faceverify.matcher import compare, parse_stored_embedding, validate_threshold
from faceverify.quality_gate import validate_image_quality
from faceverify.utils import compute_pixel_stats, to_model_tensor
from faceverify.vector_math import l2_normalize

logger = get_logger(__name__)


@dataclass
class RegistrationResult:
    """Result of registering a user.

    Attributes:
        user_id: Identifier the embedding was stored under
        embedding: L2-normalized embedding
        created_at: Store creation timestamp
        updated_at: Store update timestamp
    """

    user_id: str
    embedding: np.ndarray
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class VerificationResult:
    """Result of verifying a query image against a stored user.

    Attributes:
        user_id: Verified user
        match: Similarity decision
    """

    user_id: str
    match: MatchResult

    @property
    def is_match(self) -> bool:
        return self.match.is_match

    def __repr__(self) -> str:
        return (
            f"VerificationResult(user_id='{self.user_id}', "
            f"similarity={self.match.similarity:.4f}, is_match={self.match.is_match})"
        )


class FaceVerificationService:
    """Service for single-face enrollment and verification.

    Attributes:
        codec: Image codec service
        model: Embedding model (None until loaded; embedding calls fail)
        store: Embedding store (None disables register/verify)
        config: Frozen pipeline tunables

    Example:
        >>> service = FaceVerificationService(
        ...     codec=OpenCVImageCodec(),
        ...     model=OnnxEmbeddingModel("models/arcface.onnx"),
        ...     store=JsonEmbeddingStore("data/embeddings.json"),
        ... )
        >>> service.register_user("alice", enroll_bytes)
        >>> result = service.verify_user("alice", query_bytes)
        >>> print(result.is_match)
    """

    def __init__(
        self,
        codec: ImageCodec,
        model: Optional[EmbeddingModel] = None,
        store: Optional[EmbeddingStore] = None,
        config: PipelineConfig = PipelineConfig(),
    ):
        """Initialize verification service.

        Args:
            codec: Image codec service
            model: Embedding model instance
            store: Embedding store instance
            config: Pipeline tunables, including the similarity threshold
        """
        self.codec = codec
        self.model = model
        self.store = store
        self.config = config

        logger.info(
            f"Initialized FaceVerificationService with "
            f"threshold={config.similarity_threshold:.2f}, "
            f"model={'loaded' if model is not None else 'not loaded'}"
        )

    @property
    def threshold(self) -> float:
        return self.config.similarity_threshold

    @property
    def is_model_loaded(self) -> bool:
        return self.model is not None

    def validate_image(self, image_bytes: bytes) -> ImageMetadata:
        """Run the cheap quality gate on raw image bytes.

        Raises:
            ValidationError: If the image is unreadable or out of bounds.
        """
        metadata = self.codec.decode_metadata(image_bytes)
        logger.debug(
            f"Input image: {metadata.width}x{metadata.height}, format: {metadata.format}"
        )
        validate_image_quality(image_bytes, metadata, self.config.quality)
        return metadata

    def analyze_image_stats(self, image_bytes: bytes) -> PixelStats:
        """Brightness and contrast of the lighting downsample."""
        size = self.config.lighting.analysis_size
        return compute_pixel_stats(self.codec.resize_greyscale(image_bytes, size, size))

    def locate_face(self, image_bytes: bytes) -> Region:
        """Check lighting and sharpness, then locate exactly one face.

        Returns:
            The accepted face Region on the edge map.

        Raises:
            LightingError, BlurError, NoFaceError, MultipleFaceError
        """
        validate_lighting(self.analyze_image_stats(image_bytes), self.config.lighting)

        blur_size = self.config.blur.analysis_size
        validate_sharpness(
            self.codec.resize_greyscale(image_bytes, blur_size, blur_size),
            self.config.blur,
        )

        edges = build_edge_map(self.codec, image_bytes, self.config.detection)
        return locate_face(edges, self.config.detection)

    def preprocess(self, image_bytes: bytes) -> np.ndarray:
        """Validate an image and produce the model input crop.

        Args:
            image_bytes: Encoded image

        Returns:
            RGB uint8 array of shape [target_size, target_size, 3].

        Raises:
            Any pipeline error from the quality gate through face location.
        """
        self.validate_image(image_bytes)
        self.locate_face(image_bytes)

        size = self.config.target_size
        rgb = self.codec.resize_cover_rgb(image_bytes, size, size)

        expected = size * size * 3
        if rgb.size != expected:
            raise ValidationError(
                f"Processed image size mismatch. Expected {expected}, got {rgb.size}",
                expected=expected,
                actual=int(rgb.size),
            )

        logger.info(f"Image preprocessed to {size}x{size}")
        return rgb.reshape(size, size, 3)

    def embed(self, face_rgb: np.ndarray) -> np.ndarray:
        """Run the model on a preprocessed crop and L2-normalize the output.

        Raises:
            ModelNotLoadedError: If no model is attached.
            EmptyVectorError / ZeroVectorError: For a degenerate model output.
        """
        if self.model is None:
            raise ModelNotLoadedError("AI model not loaded. Please wait for initialization.")

        raw = np.asarray(self.model.infer(to_model_tensor(face_rgb))).ravel()
        if raw.size == 0:
            raise EmptyVectorError("Failed to generate valid embedding")

        if raw.size != self.config.embedding_dim:
            logger.warning(
                f"Unexpected embedding dimension {raw.size}, "
                f"expected {self.config.embedding_dim}"
            )

        return l2_normalize(raw)

    def create_embedding(self, image_bytes: bytes) -> np.ndarray:
        """Full pipeline from image bytes to a unit-norm embedding."""
        if self.model is None:
            raise ModelNotLoadedError("AI model not loaded. Please wait for initialization.")

        embedding = self.embed(self.preprocess(image_bytes))
        logger.info(f"Generated {embedding.size}D embedding")
        return embedding

    def _require_store(self) -> EmbeddingStore:
        if self.store is None:
            raise RuntimeError("No embedding store configured")
        return self.store

    def register_user(
        self, user_id: Optional[str], image_bytes: bytes
    ) -> RegistrationResult:
        """Create an embedding for an image and store it for a user.

        Args:
            user_id: Identifier; one is generated when None or empty
            image_bytes: Enrollment image

        Returns:
            RegistrationResult with the stored embedding and timestamps.
        """
        store = self._require_store()
        user_id = user_id or f"user_{uuid.uuid4().hex[:12]}"

        logger.info(f"Registering user: {user_id}")
        embedding = self.create_embedding(image_bytes)
        confirmation = store.put(user_id, embedding.tolist())

        logger.info(f"User {user_id} registered successfully")
        return RegistrationResult(
            user_id=user_id,
            embedding=embedding,
            created_at=confirmation.get("created_at"),
            updated_at=confirmation.get("updated_at"),
        )

    def verify_user(self, user_id: str, image_bytes: bytes) -> VerificationResult:
        """Compare a query image against a user's stored embedding.

        Raises:
            UserNotFoundError: If the user has no stored embedding.
        """
        store = self._require_store()

        stored = store.get(user_id)
        if stored is None:
            raise UserNotFoundError(f"User {user_id} not found in database", user_id=user_id)

        stored_embedding = parse_stored_embedding(stored)
        query = self.create_embedding(image_bytes)
        match = compare(stored_embedding, query, self.threshold)

        logger.info(
            f"Verified {user_id}: similarity={match.similarity:.4f}, "
            f"threshold={match.threshold}, match={match.is_match}"
        )
        return VerificationResult(user_id=user_id, match=match)

    def compare_embeddings(self, image_bytes: bytes, stored_raw: Any) -> MatchResult:
        """Compare a query image against a caller-supplied stored embedding.

        Args:
            image_bytes: Query image
            stored_raw: Stored embedding as JSON text or numeric sequence

        Returns:
            MatchResult of the stored embedding against the query.

        Raises:
            EmbeddingFormatError: If stored_raw is invalid.
            DimensionMismatchError: If the lengths differ.
        """
        stored_embedding = parse_stored_embedding(stored_raw)
        query = self.create_embedding(image_bytes)
        return compare(stored_embedding, query, self.threshold)

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Raises:
            ValueError: If threshold is not in [0, 1].
        """
        threshold = validate_threshold(threshold)
        old_threshold = self.threshold
        self.config = replace(self.config, similarity_threshold=threshold)
        logger.info(f"Similarity threshold updated: {old_threshold:.2f} -> {threshold:.2f}")

    def service_info(self) -> dict:
        """Describe tunables, requirements, and checks of the pipeline."""
        quality = self.config.quality
        detection = self.config.detection
        return {
            "service": "Face Verification Service",
            "model": {
                "embeddingDimensions": self.config.embedding_dim,
                "targetImageSize": f"{self.config.target_size}x{self.config.target_size}",
                "modelLoaded": self.is_model_loaded,
            },
            "validation": {
                "similarityThreshold": self.threshold,
                "supportedFormats": [f.upper() for f in quality.supported_formats],
                "minResolution": (
                    f"min dimension >={quality.min_short_side}px, "
                    f"max dimension >={quality.min_long_side}px"
                ),
                "maxResolution": f"{quality.max_dimension}x{quality.max_dimension}",
                "maxFileSize": f"{quality.max_file_size // (1024 * 1024)}MB",
                "minFaceSize": f"{detection.min_face_size * 100:.1f}% of image",
                "maxFaces": detection.max_faces,
                "blurThreshold": self.config.blur.blur_threshold,
            },
            "checks": self.checks(),
        }

    @staticmethod
    def checks() -> List[str]:
        return [
            "Image quality and format",
            "Lighting conditions",
            "Blur/sharpness detection",
            "Face presence and count with confidence scoring",
            "Overlap removal for multiple detections",
        ]

    def __repr__(self) -> str:
        return (
            f"FaceVerificationService(threshold={self.threshold:.2f}, "
            f"model={self.model}, store={self.store})"
        )
