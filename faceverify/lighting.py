"""Lighting validation from greyscale brightness and contrast."""

from __future__ import annotations

from faceverify.config import LightingConfig
from faceverify.errors import LightingError
from faceverify.interfaces import PixelStats
from faceverify.logging_config import get_logger

logger = get_logger(__name__)

TOO_DARK = "too_dark"
TOO_BRIGHT = "too_bright"
LOW_CONTRAST = "low_contrast"


def validate_lighting(stats: PixelStats, config: LightingConfig = LightingConfig()) -> None:
    """Check brightness and contrast of a greyscale downsample.

    Args:
        stats: Mean (brightness) and std (contrast) of the downsample
        config: Lighting limits

    Raises:
        LightingError: With ``condition`` set to ``too_dark``, ``too_bright``
            or ``low_contrast``.
    """
    brightness, contrast = stats.mean, stats.std
    logger.debug(f"Image analysis - Brightness: {brightness:.2f}, Contrast: {contrast:.2f}")

    if brightness < config.min_brightness:
        raise LightingError(
            "Image too dark - poor lighting conditions detected. "
            "Please ensure adequate lighting and try again.",
            condition=TOO_DARK,
            brightness=brightness,
        )

    if brightness > config.max_brightness:
        raise LightingError(
            "Image too bright - overexposed image detected. "
            "Please reduce lighting or avoid direct flash.",
            condition=TOO_BRIGHT,
            brightness=brightness,
        )

    if contrast < config.min_contrast:
        raise LightingError(
            "Low contrast image - face features may not be clear. "
            "Please ensure good lighting with clear shadows.",
            condition=LOW_CONTRAST,
            contrast=contrast,
        )
