"""Pixel-level helper functions for the face verification pipeline.

This module provides the buffer statistics used by the lighting and blur
checks, the cover-resize geometry used by the codec, and the tensor
normalization expected by the embedding model.
"""

from __future__ import annotations

import math
from typing import Tuple

import cv2
import numpy as np

from faceverify.interfaces import PixelStats
from faceverify.logging_config import get_logger

logger = get_logger(__name__)


def compute_pixel_stats(grey: np.ndarray) -> PixelStats:
    """Compute mean and standard deviation of a greyscale buffer.

    Uses the single-pass moments ``mean = sum / N`` and
    ``std = sqrt(sum(p^2) / N - mean^2)``.

    Args:
        grey: Greyscale samples, any shape, values in [0, 255]

    Returns:
        PixelStats with mean brightness and std contrast.

    Raises:
        ValueError: If the buffer is empty.

    Example:
        >>> stats = compute_pixel_stats(np.full((224, 224), 128, dtype=np.uint8))
        >>> stats.mean, stats.std
        (128.0, 0.0)
    """
    pixels = np.asarray(grey, dtype=np.float64).ravel()
    if pixels.size == 0:
        raise ValueError("Cannot compute statistics of an empty buffer")

    count = pixels.size
    mean = float(pixels.sum() / count)
    variance = float(np.square(pixels).sum() / count - mean * mean)

    # Rounding can push a constant buffer slightly below zero
    return PixelStats(mean=mean, std=math.sqrt(max(variance, 0.0)))


def compute_laplacian_variance(grey: np.ndarray) -> float:
    """Compute the Laplacian blur metric over the buffer interior.

    Applies the 4-neighbour Laplacian ``[[0,-1,0],[-1,4,-1],[0,-1,0]]`` to
    every interior pixel (the one-pixel border is excluded), then divides
    the sum of squared responses by the interior pixel count. Higher values
    mean more edges and thus a sharper image.

    Args:
        grey: Greyscale image, shape [H, W]

    Returns:
        Mean squared Laplacian response. 0.0 for a constant buffer or a
        buffer without interior pixels.

    Example:
        >>> variance = compute_laplacian_variance(grey_300)
        >>> if variance < 100:
        ...     print("Image too blurry")
    """
    grey = np.asarray(grey)
    if grey.ndim != 2:
        raise ValueError(f"Expected greyscale image [H, W], got shape {grey.shape}")

    h, w = grey.shape
    if h < 3 or w < 3:
        return 0.0

    # OpenCV's ksize=1 Laplacian is the same stencil with opposite sign,
    # which squaring removes
    laplacian = cv2.Laplacian(grey.astype(np.float64), cv2.CV_64F, ksize=1)
    interior = laplacian[1:-1, 1:-1]

    return float(np.square(interior).sum() / interior.size)


def cover_crop_box(
    src_width: int,
    src_height: int,
    target_width: int,
    target_height: int,
) -> Tuple[int, int, int, int]:
    """Compute the centered crop that fills the target aspect ratio.

    The crop keeps as much of the source as possible while matching the
    target aspect ratio, so a subsequent resize fills the target exactly.

    Args:
        src_width, src_height: Source image size
        target_width, target_height: Output size

    Returns:
        Crop as (x1, y1, x2, y2), end-exclusive.

    Example:
        >>> cover_crop_box(400, 200, 112, 112)
        (100, 0, 300, 200)
    """
    if src_width <= 0 or src_height <= 0:
        raise ValueError(f"Invalid source size {src_width}x{src_height}")

    scale = max(target_width / src_width, target_height / src_height)
    crop_w = min(src_width, max(1, round(target_width / scale)))
    crop_h = min(src_height, max(1, round(target_height / scale)))

    x1 = (src_width - crop_w) // 2
    y1 = (src_height - crop_h) // 2
    return x1, y1, x1 + crop_w, y1 + crop_h


def to_model_tensor(rgb: np.ndarray) -> np.ndarray:
    """Map an RGB uint8 crop to the embedding model input tensor.

    Args:
        rgb: Interleaved RGB image, shape [H, W, 3], values in [0, 255]

    Returns:
        float32 tensor of shape [1, H, W, 3] with values in [-1, 1].

    Example:
        >>> tensor = to_model_tensor(face_rgb_112)
        >>> tensor.shape
        (1, 112, 112, 3)
    """
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValueError(f"Expected RGB image [H, W, 3], got shape {rgb.shape}")

    tensor = (rgb.astype(np.float64) / 127.5 - 1.0).astype(np.float32)
    return tensor[np.newaxis, ...]
