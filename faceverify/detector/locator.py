"""Heuristic face locator over an edge map.

Runs up to three detection passes with decreasing edge thresholds. Each pass
seeds regions on a coarse grid, grows them, filters them by geometry,
scores them for face-likeness, and removes overlaps. The first pass that
yields any region wins.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List

import numpy as np

from faceverify.config import DetectionConfig
from faceverify.detector.overlap import resolve_overlaps
from faceverify.detector.region_grower import grow_region, new_visited
from faceverify.detector.scoring import score_region
from faceverify.errors import MultipleFaceError, NoFaceError
from faceverify.interfaces import Region
from faceverify.logging_config import get_logger

logger = get_logger(__name__)


def passes_geometry(region: Region, config: DetectionConfig = DetectionConfig()) -> bool:
    """Check aspect ratio, elongation, minimum side, and density bounds."""
    min_side = config.min_region_size * config.min_side_factor
    size_ratio = min(region.width, region.height) / max(region.width, region.height)

    return (
        config.min_aspect_ratio < region.aspect_ratio < config.max_aspect_ratio
        and size_ratio > config.min_size_ratio
        and region.width > min_side
        and region.height > min_side
        and config.min_density < region.density < config.max_density
    )


def find_face_regions(
    edges: np.ndarray,
    edge_threshold: int = 40,
    region_threshold: int = 25,
    config: DetectionConfig = DetectionConfig(),
) -> List[Region]:
    """Run a single detection pass.

    Args:
        edges: Edge map, shape [H, W], uint8
        edge_threshold: Minimum intensity for a seed pixel
        region_threshold: Minimum intensity admitted while growing
        config: Detection tunables

    Returns:
        Scored, non-overlapping regions, highest score first. May be empty.
    """
    height, width = edges.shape
    min_region = config.min_region_size
    min_pixels = min_region * min_region * config.min_region_fill

    pixels = edges.ravel().tolist()
    visited = new_visited(width, height)

    # Step 1: seed and grow candidate regions
    candidates: List[Region] = []
    for y in range(min_region, height - min_region, config.seed_stride):
        for x in range(min_region, width - min_region, config.seed_stride):
            index = y * width + x
            if visited[index] or pixels[index] < edge_threshold:
                continue

            grown = grow_region(pixels, width, height, x, y, visited, region_threshold)
            if grown.size > min_pixels:
                candidates.append(grown.to_region())

    # Step 2: geometric constraints
    geometric = [r for r in candidates if passes_geometry(r, config)]

    # Step 3: face-specific features
    scored: List[Region] = []
    for region in geometric:
        face_score = score_region(edges, region, config)
        if face_score > config.min_face_score:
            scored.append(replace(region, face_score=face_score))

    # Step 4: overlap removal
    final = resolve_overlaps(scored, config.max_overlap)

    logger.debug(
        f"Face detection results: {len(candidates)} initial -> {len(geometric)} geometric "
        f"-> {len(scored)} face-validated -> {len(final)} final"
    )
    return final


def locate_faces(edges: np.ndarray, config: DetectionConfig = DetectionConfig()) -> List[Region]:
    """Run detection passes until one yields at least one region.

    Args:
        edges: Edge map, shape [H, W], uint8
        config: Detection tunables, including the ordered threshold passes

    Returns:
        Regions from the first non-empty pass, or an empty list.
    """
    for i, (edge_threshold, region_threshold) in enumerate(config.passes, 1):
        regions = find_face_regions(edges, edge_threshold, region_threshold, config)
        logger.debug(
            f"Pass {i} (edge={edge_threshold}, region={region_threshold}): "
            f"{len(regions)} potential face regions"
        )
        if regions:
            return regions
    return []


def locate_face(edges: np.ndarray, config: DetectionConfig = DetectionConfig()) -> Region:
    """Locate exactly one face on the edge map.

    Args:
        edges: Edge map, shape [H, W], uint8
        config: Detection tunables

    Returns:
        The single accepted Region.

    Raises:
        NoFaceError: If every pass comes up empty.
        MultipleFaceError: If more than ``config.max_faces`` regions survive.

    Example:
        >>> edges = build_edge_map(codec, data)
        >>> region = locate_face(edges)
        >>> print(f"Face at ({region.x}, {region.y}) score={region.face_score:.2f}")
    """
    regions = locate_faces(edges, config)

    if not regions:
        raise NoFaceError(
            "No face detected in the image. Please ensure a clear, front-facing "
            "photo with good lighting. Try adjusting brightness or contrast.",
            passes=len(config.passes),
        )

    if len(regions) > config.max_faces:
        raise MultipleFaceError(
            f"Multiple faces detected ({len(regions)}). "
            f"Please provide an image with only one person.",
            count=len(regions),
        )

    region = regions[0]
    logger.info(f"Located face: {region}")
    return region
