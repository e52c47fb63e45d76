"""Unit tests for connected-region growing."""

from __future__ import annotations

import numpy as np
import pytest

from faceverify.detector.region_grower import GrownRegion, grow_region, new_visited


@pytest.fixture
def square_buffer():
    """10x10 buffer with a 4x4 square of 200 at columns 2-5, rows 3-6."""
    buf = np.zeros((10, 10), dtype=np.uint8)
    buf[3:7, 2:6] = 200
    return buf


def test_grow_square_exact_bounds(square_buffer):
    """Test that the grown region covers exactly the square."""
    visited = new_visited(10, 10)
    grown = grow_region(square_buffer.ravel().tolist(), 10, 10, 3, 4, visited, threshold=100)

    assert (grown.min_x, grown.max_x) == (2, 5)
    assert (grown.min_y, grown.max_y) == (3, 6)
    assert grown.size == 16


def test_grown_region_to_region(square_buffer):
    """Test conversion to Region with inclusive extents."""
    visited = new_visited(10, 10)
    region = grow_region(
        square_buffer.ravel().tolist(), 10, 10, 3, 4, visited, threshold=100
    ).to_region()

    assert region is not None
    assert (region.x, region.y) == (2, 3)
    assert (region.width, region.height) == (4, 4)
    assert region.size == 16
    assert region.density == pytest.approx(1.0)


def test_visited_marks_admitted_pixels(square_buffer):
    """Test that admitted pixels are marked and others are not."""
    visited = new_visited(10, 10)
    grow_region(square_buffer.ravel().tolist(), 10, 10, 3, 4, visited, threshold=100)

    marks = np.frombuffer(bytes(visited), dtype=np.uint8).reshape(10, 10)
    assert marks.sum() == 16
    assert np.all(marks[3:7, 2:6] == 1)


def test_visited_shared_across_calls(square_buffer):
    """Test that a second grow from a visited seed admits nothing."""
    pixels = square_buffer.ravel().tolist()
    visited = new_visited(10, 10)

    grow_region(pixels, 10, 10, 3, 4, visited, threshold=100)
    again = grow_region(pixels, 10, 10, 4, 5, visited, threshold=100)

    assert again.size == 0
    assert again.to_region() is None


def test_rejected_seed():
    """Test that a seed below threshold yields an empty region."""
    buf = np.zeros((5, 5), dtype=np.uint8)
    visited = new_visited(5, 5)

    grown = grow_region(buf.ravel().tolist(), 5, 5, 2, 2, visited, threshold=30)

    assert grown.size == 0
    assert (grown.min_x, grown.max_x, grown.min_y, grown.max_y) == (2, 2, 2, 2)
    assert sum(visited) == 0


def test_diagonal_connectivity():
    """Test that diagonal neighbours are connected (8-connectivity)."""
    buf = np.zeros((5, 5), dtype=np.uint8)
    buf[1, 1] = 200
    buf[2, 2] = 200
    buf[3, 3] = 200

    grown = grow_region(buf.ravel().tolist(), 5, 5, 1, 1, new_visited(5, 5), threshold=100)

    assert grown.size == 3
    assert (grown.width, grown.height) == (3, 3)


def test_region_touching_borders():
    """Test growing a region that spans the whole buffer."""
    buf = np.full((6, 8), 255, dtype=np.uint8)

    grown = grow_region(buf.ravel().tolist(), 8, 6, 0, 0, new_visited(8, 6), threshold=1)

    assert grown.size == 48
    assert (grown.min_x, grown.max_x, grown.min_y, grown.max_y) == (0, 7, 0, 5)


def test_threshold_is_inclusive():
    """Test that a pixel equal to the threshold is admitted."""
    buf = np.array([[30, 29], [0, 0]], dtype=np.uint8)

    grown = grow_region(buf.ravel().tolist(), 2, 2, 0, 0, new_visited(2, 2), threshold=30)

    assert grown.size == 1


def test_grown_region_dimensions():
    """Test inclusive width and height of a GrownRegion."""
    grown = GrownRegion(min_x=10, max_x=19, min_y=5, max_y=9, size=20)

    assert grown.width == 10
    assert grown.height == 5
    assert grown.to_region().density == pytest.approx(0.4)
