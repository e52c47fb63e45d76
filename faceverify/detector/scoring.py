"""Face-likeness scoring for candidate regions.

Five sub-scores, each in [0, 1], are combined into one confidence value:

- symmetry: faces are roughly mirror-symmetric around the vertical axis
- eye pattern: a band of strong horizontal edges in the upper part
- mouth pattern: a weaker horizontal band in the lower part
- edge distribution: moderate edge density, concentrated near the center
- position: faces tend to sit in the horizontal center, upper area

Weights and edge thresholds come from DetectionConfig. The band geometry
below is fixed.
"""

from __future__ import annotations

import math
from typing import Dict

import numpy as np

from faceverify.config import DetectionConfig
from faceverify.interfaces import Region

# Eye band: top 40% of the region, 15% trimmed on each side
EYE_BAND_HEIGHT = 0.4
EYE_MARGIN = 0.15
EYE_EXPECTED_WIDTH = 0.7

# Mouth band: bottom 40% of the region, 20% trimmed on each side
MOUTH_BAND_TOP = 0.6
MOUTH_MARGIN = 0.2
MOUTH_EXPECTED_WIDTH = 0.6

# Edge distribution
DENSITY_RANGE = (0.1, 0.4)
CENTER_RADIUS_FACTOR = 0.3
MIN_CENTER_CONCENTRATION = 0.3

# Position
UPPER_AREA_LIMIT = 0.6
VERTICAL_FALLOFF = 2.5

ROW_STEP = 2


def symmetry_score(
    edges: np.ndarray,
    region: Region,
    config: DetectionConfig = DetectionConfig(),
) -> float:
    """Compare mirrored edge intensities around the region's vertical axis.

    Every other row of the region is sampled. For each offset in
    ``1 <= offset < min(width / 2, symmetry_max_offset)`` the pixels at
    ``center - offset`` and ``center + offset`` contribute
    ``max(0, tolerance - |diff|) / tolerance``; the result is the mean.
    """
    img_w = edges.shape[1]
    center_x = region.x + region.width // 2

    max_offset = min(region.width / 2, config.symmetry_max_offset)
    offsets = np.arange(1, math.ceil(max_offset))
    offsets = offsets[(center_x - offsets >= 0) & (center_x + offsets < img_w)]

    rows = edges[region.y : region.y + region.height : ROW_STEP]
    if offsets.size == 0 or rows.shape[0] == 0:
        return 0.0

    left = rows[:, center_x - offsets].astype(np.int32)
    right = rows[:, center_x + offsets].astype(np.int32)
    diff = np.abs(left - right)

    tolerance = config.symmetry_tolerance
    return float(np.mean(np.maximum(0.0, tolerance - diff) / tolerance))


def _max_row_edges(band: np.ndarray, threshold: int) -> int:
    """Largest number of pixels above threshold in any single row."""
    if band.size == 0:
        return 0
    return int((band > threshold).sum(axis=1).max())


def eye_pattern_score(
    edges: np.ndarray,
    region: Region,
    config: DetectionConfig = DetectionConfig(),
) -> float:
    """Look for an eye-like horizontal edge band in the upper region."""
    top = region.y
    bottom = region.y + int(region.height * EYE_BAND_HEIGHT)
    left = region.x + int(region.width * EYE_MARGIN)
    right = region.x + region.width - int(region.width * EYE_MARGIN)

    band = edges[top:bottom:ROW_STEP, left:right]
    max_edges = _max_row_edges(band, config.eye_edge_threshold)

    return min(max_edges / (region.width * EYE_EXPECTED_WIDTH), 1.0)


def mouth_pattern_score(
    edges: np.ndarray,
    region: Region,
    config: DetectionConfig = DetectionConfig(),
) -> float:
    """Look for a mouth-like horizontal edge band in the lower region."""
    top = region.y + int(region.height * MOUTH_BAND_TOP)
    bottom = region.y + region.height
    left = region.x + int(region.width * MOUTH_MARGIN)
    right = region.x + region.width - int(region.width * MOUTH_MARGIN)

    band = edges[top:bottom, left:right]
    max_edges = _max_row_edges(band, config.mouth_edge_threshold)

    return min(max_edges / (region.width * MOUTH_EXPECTED_WIDTH), 1.0)


def edge_distribution_score(
    edges: np.ndarray,
    region: Region,
    config: DetectionConfig = DetectionConfig(),
) -> float:
    """Score edge density and how much of it sits near the region center.

    Density scores 1.0 inside DENSITY_RANGE (exclusive) and 0.5 otherwise.
    Concentration is the share of edge pixels strictly within a disk of
    radius ``0.3 * min(width, height)``; it scores 1.0 above 0.3 and
    scales linearly below. The result is the mean of both.
    """
    patch = edges[region.y : region.y + region.height, region.x : region.x + region.width]
    ys, xs = np.nonzero(patch > config.distribution_edge_threshold)
    edge_pixels = int(xs.size)

    center_x = region.width // 2
    center_y = region.height // 2
    radius = min(region.width, region.height) * CENTER_RADIUS_FACTOR
    center_edges = int((np.hypot(xs - center_x, ys - center_y) < radius).sum())

    density = edge_pixels / region.area
    concentration = center_edges / max(edge_pixels, 1)

    low, high = DENSITY_RANGE
    density_score = 1.0 if low < density < high else 0.5
    if concentration > MIN_CENTER_CONCENTRATION:
        concentration_score = 1.0
    else:
        concentration_score = concentration / MIN_CENTER_CONCENTRATION

    return (density_score + concentration_score) / 2


def position_score(region: Region, image_width: int, image_height: int) -> float:
    """Prefer regions centered horizontally and in the upper image area."""
    center_x, center_y = region.center
    cx = center_x / image_width
    cy = center_y / image_height

    horizontal = 1.0 - abs(cx - 0.5) * 2
    if cy < UPPER_AREA_LIMIT:
        vertical = 1.0
    else:
        vertical = max(0.0, 1.0 - (cy - UPPER_AREA_LIMIT) * VERTICAL_FALLOFF)

    return max(0.0, (horizontal + vertical) / 2)


def score_components(
    edges: np.ndarray,
    region: Region,
    config: DetectionConfig = DetectionConfig(),
) -> Dict[str, float]:
    """Compute all five sub-scores for a region.

    Returns:
        Mapping of sub-score name to value in [0, 1].
    """
    height, width = edges.shape
    return {
        "symmetry": symmetry_score(edges, region, config),
        "eye": eye_pattern_score(edges, region, config),
        "mouth": mouth_pattern_score(edges, region, config),
        "edge_distribution": edge_distribution_score(edges, region, config),
        "position": position_score(region, width, height),
    }


def score_region(
    edges: np.ndarray,
    region: Region,
    config: DetectionConfig = DetectionConfig(),
) -> float:
    """Combine sub-scores into one face confidence in [0, 1].

    Args:
        edges: Edge map, shape [H, W]
        region: Candidate region on the edge map
        config: Weights and edge thresholds

    Returns:
        Weighted sum of the sub-scores, clamped to 1.0.

    Example:
        >>> score = score_region(edges, region)
        >>> if score > 0.3:
        ...     print("Face-like region")
    """
    parts = score_components(edges, region, config)
    total = (
        parts["symmetry"] * config.symmetry_weight
        + parts["eye"] * config.eye_weight
        + parts["mouth"] * config.mouth_weight
        + parts["edge_distribution"] * config.edge_distribution_weight
        + parts["position"] * config.position_weight
    )
    return min(max(total, 0.0), 1.0)
