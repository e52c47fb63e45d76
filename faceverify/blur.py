"""Blur detection using Laplacian variance."""

from __future__ import annotations

import numpy as np

from faceverify.config import BlurConfig
from faceverify.errors import BlurError
from faceverify.logging_config import get_logger
from faceverify.utils import compute_laplacian_variance

logger = get_logger(__name__)


def validate_sharpness(grey: np.ndarray, config: BlurConfig = BlurConfig()) -> float:
    """Reject images whose Laplacian variance is below the blur threshold.

    Args:
        grey: Greyscale downsample, shape [H, W] (300x300 in the pipeline)
        config: Blur threshold

    Returns:
        The measured variance, for logging by the caller.

    Raises:
        BlurError: If variance < config.blur_threshold.

    Example:
        >>> grey = codec.resize_greyscale(data, 300, 300)
        >>> variance = validate_sharpness(grey)
    """
    variance = compute_laplacian_variance(grey)
    logger.debug(f"Blur variance: {variance:.2f}")

    if variance < config.blur_threshold:
        raise BlurError(
            "Image appears blurry or out of focus. Please ensure the camera "
            "is focused and the subject is still.",
            variance=variance,
            threshold=config.blur_threshold,
        )

    return variance
