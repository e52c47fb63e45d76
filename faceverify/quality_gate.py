"""Cheap image quality gate.

Format, resolution, aspect-ratio, and file-size checks that run on the
decoded header before any pixel analysis.
"""

from __future__ import annotations

from faceverify.config import QualityConfig
from faceverify.errors import ValidationError
from faceverify.interfaces import ImageMetadata
from faceverify.logging_config import get_logger

logger = get_logger(__name__)


def validate_image_quality(
    image_bytes: bytes,
    metadata: ImageMetadata,
    config: QualityConfig = QualityConfig(),
) -> None:
    """Reject images that cannot yield a reliable face analysis.

    Checks run in order and the first violation wins:
    format, minimum resolution, maximum resolution, aspect ratio,
    file size, and a final corruption check on the dimensions.

    Args:
        image_bytes: Encoded image
        metadata: Header information from the codec
        config: Quality limits

    Raises:
        ValidationError: With the offending measured value(s) in ``details``.

    Example:
        >>> meta = codec.decode_metadata(data)
        >>> validate_image_quality(data, meta)
    """
    width, height = metadata.width, metadata.height
    fmt = (metadata.format or "").lower()

    if fmt not in config.supported_formats:
        raise ValidationError(
            f"Unsupported image format: {metadata.format}. "
            f"Supported formats: {', '.join(config.supported_formats)}. "
            f"Please convert your image to a supported format.",
            format=metadata.format,
        )

    min_dimension = min(width, height)
    max_dimension = max(width, height)
    if min_dimension < config.min_short_side or max_dimension < config.min_long_side:
        raise ValidationError(
            f"Image resolution too low: {width}x{height}. Minimum required: "
            f"smaller dimension >={config.min_short_side}px and larger dimension "
            f">={config.min_long_side}px for accurate face detection.",
            width=width,
            height=height,
        )

    if width > config.max_dimension or height > config.max_dimension:
        raise ValidationError(
            f"Image resolution too high: {width}x{height}. Maximum recommended: "
            f"{config.max_dimension}x{config.max_dimension} pixels. Please resize your image.",
            width=width,
            height=height,
        )

    aspect_ratio = width / height
    if aspect_ratio < config.min_aspect_ratio or aspect_ratio > config.max_aspect_ratio:
        raise ValidationError(
            f"Unusual image aspect ratio: {aspect_ratio:.2f}. Please use a more "
            f"standard image format (not too wide or tall).",
            aspect_ratio=aspect_ratio,
        )

    size = len(image_bytes)
    if size > config.max_file_size:
        raise ValidationError(
            f"Image file too large: {size / (1024 * 1024):.1f}MB. Maximum size: "
            f"{config.max_file_size // (1024 * 1024)}MB. Please compress your image.",
            size_bytes=size,
        )

    if size < config.min_file_size:
        raise ValidationError(
            f"Image file too small: {size} bytes. Minimum size: "
            f"{config.min_file_size // 1024}KB. The image may be corrupted or of "
            f"very poor quality.",
            size_bytes=size,
        )

    if width <= 0 or height <= 0:
        raise ValidationError(
            "Image appears to be corrupted or invalid. "
            "Please try uploading a different image.",
            width=width,
            height=height,
        )

    logger.info(f"Image quality validation passed - {width}x{height}, {fmt}")
