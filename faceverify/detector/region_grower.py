"""Connected-region growing over a thresholded edge buffer.

Regions are grown with an 8-connected flood fill driven by an explicit work
list, so stack depth stays bounded for large images. Visited pixels are
tracked in a fixed-size byte buffer indexed by ``y * width + x`` and shared
across one detection pass, so no pixel is grown twice within a pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from faceverify.interfaces import Region

# 8-connectivity, row by row
_NEIGHBOURS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


@dataclass
class GrownRegion:
    """Running bounds and pixel count of a flood fill.

    Attributes:
        min_x, max_x: Extreme columns of admitted pixels (inclusive)
        min_y, max_y: Extreme rows of admitted pixels (inclusive)
        size: Number of admitted pixels
    """

    min_x: int
    max_x: int
    min_y: int
    max_y: int
    size: int = 0

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    def to_region(self) -> Optional[Region]:
        """Convert to a Region, or None if nothing was admitted."""
        if self.size == 0:
            return None
        return Region(
            x=self.min_x,
            y=self.min_y,
            width=self.width,
            height=self.height,
            size=self.size,
            density=self.size / (self.width * self.height),
        )


def new_visited(width: int, height: int) -> bytearray:
    """Allocate a cleared visited buffer for a width x height image."""
    return bytearray(width * height)


def grow_region(
    pixels: Sequence[int],
    width: int,
    height: int,
    start_x: int,
    start_y: int,
    visited: bytearray,
    threshold: int = 30,
) -> GrownRegion:
    """Grow a connected region from a seed pixel.

    Neighbours are pushed unconditionally; bounds, visited, and threshold
    checks happen when a coordinate is popped.

    Args:
        pixels: Row-major edge intensities, length width * height
        width: Buffer width
        height: Buffer height
        start_x, start_y: Seed coordinate
        visited: Shared visited flags, length width * height (mutated)
        threshold: Minimum intensity admitted into the region

    Returns:
        GrownRegion with inclusive bounds and pixel count. If the seed itself
        is rejected, size is 0 and the bounds collapse to the seed.

    Example:
        >>> visited = new_visited(400, 400)
        >>> grown = grow_region(edges.ravel().tolist(), 400, 400, 120, 96, visited, 25)
        >>> region = grown.to_region()
    """
    region = GrownRegion(min_x=start_x, max_x=start_x, min_y=start_y, max_y=start_y)
    stack: List[Tuple[int, int]] = [(start_x, start_y)]

    while stack:
        x, y = stack.pop()

        if x < 0 or x >= width or y < 0 or y >= height:
            continue

        index = y * width + x
        if visited[index] or pixels[index] < threshold:
            continue

        visited[index] = 1
        region.size += 1

        if x < region.min_x:
            region.min_x = x
        elif x > region.max_x:
            region.max_x = x
        if y < region.min_y:
            region.min_y = y
        elif y > region.max_y:
            region.max_y = y

        for dx, dy in _NEIGHBOURS:
            stack.append((x + dx, y + dy))

    return region
