"""Edge map construction for the face locator."""

from __future__ import annotations

import numpy as np

from faceverify.config import DetectionConfig
from faceverify.interfaces import ImageCodec
from faceverify.logging_config import get_logger

logger = get_logger(__name__)


def build_edge_map(
    codec: ImageCodec,
    image_bytes: bytes,
    config: DetectionConfig = DetectionConfig(),
) -> np.ndarray:
    """Build the edge-intensity buffer used by the face locator.

    The image is downsampled to a square greyscale buffer and convolved with
    the high-pass kernel from ``config.edge_kernel``. The kernel weights sum
    to zero, so flat areas map to 0 and only local structure survives.

    Args:
        codec: Image codec service
        image_bytes: Encoded image
        config: Detection tunables (map size and kernel)

    Returns:
        uint8 array of shape [edge_map_size, edge_map_size].

    Example:
        >>> edges = build_edge_map(codec, data)
        >>> edges.shape
        (400, 400)
    """
    size = config.edge_map_size
    grey = codec.resize_greyscale(image_bytes, size, size)
    edges = codec.convolve3x3(grey, config.edge_kernel)

    if edges.shape != (size, size):
        raise ValueError(f"Edge map shape {edges.shape} does not match ({size}, {size})")

    logger.debug(
        f"Built {size}x{size} edge map (mean intensity {float(np.mean(edges)):.2f})"
    )
    return edges
