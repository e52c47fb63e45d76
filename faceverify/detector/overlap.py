"""Greedy non-max suppression over scored face regions."""

from __future__ import annotations

from typing import List, Sequence

from faceverify.interfaces import Region


def overlap_area(a: Region, b: Region) -> int:
    """Compute the intersection area of two regions.

    Example:
        >>> a = Region(x=0, y=0, width=10, height=10, size=50, density=0.5)
        >>> b = Region(x=5, y=5, width=10, height=10, size=50, density=0.5)
        >>> overlap_area(a, b)
        25
    """
    left = max(a.x, b.x)
    right = min(a.x + a.width, b.x + b.width)
    top = max(a.y, b.y)
    bottom = min(a.y + a.height, b.y + b.height)

    if left < right and top < bottom:
        return (right - left) * (bottom - top)
    return 0


def overlap_ratio(a: Region, b: Region) -> float:
    """Intersection area divided by the smaller region's area."""
    return overlap_area(a, b) / min(a.area, b.area)


def resolve_overlaps(regions: Sequence[Region], max_overlap: float = 0.3) -> List[Region]:
    """Keep the highest-scoring regions that do not overlap each other.

    Regions are visited by face_score, highest first; equal scores keep
    their input order. A region is dropped if it overlaps any already
    accepted region by more than ``max_overlap`` of the smaller area.

    Args:
        regions: Scored candidate regions
        max_overlap: Overlap ratio above which the weaker region is dropped

    Returns:
        Accepted regions ordered by descending face_score.
    """
    if len(regions) <= 1:
        return list(regions)

    ordered = sorted(regions, key=lambda r: r.face_score, reverse=True)
    accepted: List[Region] = []

    for region in ordered:
        if any(overlap_ratio(region, kept) > max_overlap for kept in accepted):
            continue
        accepted.append(region)

    return accepted
