"""Unit tests for the multi-pass face locator."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import Mock

import numpy as np
import pytest

from conftest import draw_face
from faceverify.config import DetectionConfig
from faceverify.detector import build_edge_map, find_face_regions, locate_face, locate_faces
from faceverify.detector.locator import passes_geometry
from faceverify.errors import MultipleFaceError, NoFaceError
from faceverify.interfaces import Region


def test_passes_geometry_face():
    """Test that a face-shaped region passes the geometric filter."""
    region = Region(x=152, y=104, width=97, height=121, size=1818, density=0.155)

    assert passes_geometry(region)


@pytest.mark.parametrize(
    "width,height,density",
    [
        (200, 60, 0.3),  # too wide
        (30, 30, 0.3),  # too small
        (100, 100, 0.05),  # too sparse
        (100, 100, 0.9),  # too dense
    ],
)
def test_passes_geometry_rejects(width, height, density):
    """Test that badly shaped regions fail the geometric filter."""
    region = Region(x=0, y=0, width=width, height=height, size=1, density=density)

    assert not passes_geometry(region)


def test_find_single_face(face_edges):
    """Test that one face pattern yields exactly one region."""
    regions = find_face_regions(face_edges)

    assert len(regions) == 1
    region = regions[0]
    assert (region.x, region.y) == (152, 104)
    assert (region.width, region.height) == (97, 121)
    assert region.size == 1818
    assert region.face_score > 0.3


def test_find_on_blank(blank_edges):
    """Test that an empty edge map yields no regions."""
    assert find_face_regions(blank_edges) == []


def test_small_blob_rejected(blank_edges):
    """Test that a blob smaller than the minimum face side is filtered."""
    blank_edges[200:220, 200:220] = 255

    assert find_face_regions(blank_edges) == []


def test_min_face_score_filter(face_edges):
    """Test that regions scoring at or below min_face_score are dropped."""
    config = replace(DetectionConfig(), min_face_score=0.95)

    assert find_face_regions(face_edges, config=config) == []


def test_faint_face_found_in_later_pass(blank_edges):
    """Test that a face too faint for the first pass is found by the second."""
    draw_face(blank_edges, 152, 104, value=35)

    assert find_face_regions(blank_edges, 40, 25) == []

    regions = locate_faces(blank_edges)
    assert len(regions) == 1
    assert (regions[0].x, regions[0].y) == (152, 104)


def test_locate_face(face_edges):
    """Test locating exactly one face."""
    region = locate_face(face_edges)

    assert (region.width, region.height) == (97, 121)
    assert 0.3 < region.face_score <= 1.0


def test_locate_face_none(blank_edges):
    """Test that no face after all passes raises NoFaceError."""
    with pytest.raises(NoFaceError) as exc_info:
        locate_face(blank_edges)

    assert exc_info.value.kind == "no_face"
    assert exc_info.value.details["passes"] == 3


def test_locate_face_multiple(two_face_edges):
    """Test that two faces raise MultipleFaceError with the count."""
    with pytest.raises(MultipleFaceError) as exc_info:
        locate_face(two_face_edges)

    assert exc_info.value.count == 2


def test_locate_face_multiple_allowed(two_face_edges):
    """Test that raising max_faces returns the best region."""
    config = replace(DetectionConfig(), max_faces=2)

    region = locate_face(two_face_edges, config)

    assert region.x in (56, 232)
    regions = locate_faces(two_face_edges, config)
    assert regions[0].face_score >= regions[1].face_score


def test_build_edge_map():
    """Test edge map construction through the codec protocol."""
    codec = Mock()
    grey = np.zeros((400, 400), dtype=np.uint8)
    codec.resize_greyscale.return_value = grey
    codec.convolve3x3.return_value = grey

    edges = build_edge_map(codec, b"image")

    codec.resize_greyscale.assert_called_once_with(b"image", 400, 400)
    codec.convolve3x3.assert_called_once_with(grey, DetectionConfig().edge_kernel)
    assert edges.shape == (400, 400)


def test_build_edge_map_shape_mismatch():
    """Test that a codec returning the wrong shape is rejected."""
    codec = Mock()
    codec.resize_greyscale.return_value = np.zeros((400, 400), dtype=np.uint8)
    codec.convolve3x3.return_value = np.zeros((10, 10), dtype=np.uint8)

    with pytest.raises(ValueError):
        build_edge_map(codec, b"image")
