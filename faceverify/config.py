"""Configuration management for the face verification pipeline.

This module loads process settings from environment variables (.env file)
and defines the frozen tunables that every pipeline stage receives at call
time. The detection constants are empirically chosen calibration knobs, kept
here by name so a test suite can tune them without touching the algorithms.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass(frozen=True)
class QualityConfig:
    """Cheap checks run before any pixel analysis.

    Attributes:
        supported_formats: Accepted codec format names (lowercase)
        min_short_side: Minimum length of the smaller image dimension
        min_long_side: Minimum length of the larger image dimension
        max_dimension: Maximum width and height
        min_aspect_ratio: Minimum width/height ratio
        max_aspect_ratio: Maximum width/height ratio
        min_file_size: Minimum encoded size in bytes
        max_file_size: Maximum encoded size in bytes
    """

    supported_formats: Tuple[str, ...] = ("jpeg", "jpg", "png", "webp")
    min_short_side: int = 150
    min_long_side: int = 200
    max_dimension: int = 4000
    min_aspect_ratio: float = 0.5
    max_aspect_ratio: float = 2.0
    min_file_size: int = 2048
    max_file_size: int = 10 * 1024 * 1024


@dataclass(frozen=True)
class LightingConfig:
    """Brightness and contrast limits measured on a greyscale downsample."""

    analysis_size: int = 224
    min_brightness: float = 30.0
    max_brightness: float = 200.0
    min_contrast: float = 15.0


@dataclass(frozen=True)
class BlurConfig:
    """Laplacian variance sharpness check."""

    analysis_size: int = 300
    blur_threshold: float = 100.0


@dataclass(frozen=True)
class DetectionConfig:
    """Tunables for the edge-based face locator.

    Attributes:
        edge_map_size: Side of the square greyscale downsample
        edge_kernel: 3x3 high-pass kernel, row-major
        passes: Ordered (edge_threshold, region_threshold) pairs
        min_face_size: Border / minimum region side as a fraction of the map
        seed_stride: Seed scan step in both axes
        min_region_fill: Grown regions need size > min_region^2 * this
        min_aspect_ratio / max_aspect_ratio: Open interval for width/height
        min_size_ratio: min(w, h) / max(w, h) must exceed this
        min_side_factor: Width and height must exceed min_region * this
        min_density / max_density: Open interval for region density
        min_face_score: Regions must score above this
        max_overlap: NMS cutoff, intersection over the smaller area
        max_faces: More accepted regions than this is a failure
    """

    edge_map_size: int = 400
    edge_kernel: Tuple[int, ...] = (-1, -1, -1, -1, 8, -1, -1, -1, -1)
    passes: Tuple[Tuple[int, int], ...] = ((40, 25), (30, 20), (20, 15))
    min_face_size: float = 0.1
    seed_stride: int = 8
    min_region_fill: float = 0.08
    min_aspect_ratio: float = 0.6
    max_aspect_ratio: float = 1.7
    min_size_ratio: float = 0.5
    min_side_factor: float = 0.8
    min_density: float = 0.1
    max_density: float = 0.8
    min_face_score: float = 0.3
    max_overlap: float = 0.3
    max_faces: int = 1

    # Face scorer weights and thresholds
    symmetry_weight: float = 0.30
    eye_weight: float = 0.25
    mouth_weight: float = 0.20
    edge_distribution_weight: float = 0.15
    position_weight: float = 0.10
    symmetry_max_offset: int = 15
    symmetry_tolerance: float = 50.0
    eye_edge_threshold: int = 40
    mouth_edge_threshold: int = 35
    distribution_edge_threshold: int = 30

    @property
    def min_region_size(self) -> int:
        """Border width and minimum region side in pixels."""
        return int(self.edge_map_size * self.min_face_size)


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable bundle of every stage configuration.

    Attributes:
        target_size: Side of the RGB crop handed to the embedding model
        embedding_dim: Expected length of model output
        similarity_threshold: Default match threshold in [0, 1]
    """

    quality: QualityConfig = field(default_factory=QualityConfig)
    lighting: LightingConfig = field(default_factory=LightingConfig)
    blur: BlurConfig = field(default_factory=BlurConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    target_size: int = 112
    embedding_dim: int = 512
    similarity_threshold: float = 0.6

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold must be between 0.0 and 1.0, "
                f"got {self.similarity_threshold}"
            )


@dataclass
class Config:
    """Process configuration loaded from environment variables.

    Attributes:
        thresh: Cosine similarity threshold for face matching (0.0-1.0)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        model_path: ONNX embedding model file
        store_path: JSON file backing the embedding store
        blur_threshold: Minimum Laplacian variance for sharpness check
        max_faces: Maximum number of faces allowed in an image
    """

    thresh: float
    log_level: str
    model_path: Path
    store_path: Path
    blur_threshold: float
    max_faces: int

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables.

        Returns:
            Config instance with values from environment or defaults.

        Raises:
            ValueError: If environment variables are invalid.
        """
        # Get project root (parent of faceverify/)
        project_root = Path(__file__).parent.parent

        # Similarity threshold
        thresh = float(os.getenv("THRESH", "0.6"))
        if not 0.0 <= thresh <= 1.0:
            raise ValueError(f"THRESH must be between 0.0 and 1.0, got {thresh}")

        # Logging configuration
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got {log_level}")

        # Model and storage
        model_path = Path(os.getenv("MODEL_PATH", str(project_root / "models" / "arcface.onnx")))
        store_path = Path(os.getenv("STORE_PATH", str(project_root / "data" / "embeddings.json")))

        # Quality gates
        blur_threshold = float(os.getenv("BLUR_THRESHOLD", "100"))
        if blur_threshold < 0:
            raise ValueError(f"BLUR_THRESHOLD must be >= 0, got {blur_threshold}")

        max_faces = int(os.getenv("MAX_FACES", "1"))
        if max_faces < 1:
            raise ValueError(f"MAX_FACES must be >= 1, got {max_faces}")

        return cls(
            thresh=thresh,
            log_level=log_level,
            model_path=model_path,
            store_path=store_path,
            blur_threshold=blur_threshold,
            max_faces=max_faces,
        )

    def pipeline_config(self) -> PipelineConfig:
        """Build the frozen pipeline tunables for this process."""
        defaults = PipelineConfig()
        return replace(
            defaults,
            blur=replace(defaults.blur, blur_threshold=self.blur_threshold),
            detection=replace(defaults.detection, max_faces=self.max_faces),
            similarity_threshold=self.thresh,
        )

    def __repr__(self) -> str:
        """Return string representation of config."""
        return (
            f"Config(\n"
            f"  Threshold: {self.thresh},\n"
            f"  Log Level: {self.log_level},\n"
            f"  Model: {self.model_path},\n"
            f"  Store: {self.store_path},\n"
            f"  Blur Threshold: {self.blur_threshold},\n"
            f"  Max Faces: {self.max_faces}\n"
            f")"
        )


# Global config instance (lazy-loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get global config instance (singleton pattern).

    Returns:
        Config instance loaded from environment.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
