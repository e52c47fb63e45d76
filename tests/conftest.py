"""Shared fixtures for the face verification test suite."""

from __future__ import annotations

import numpy as np
import pytest

FACE_WIDTH = 97
FACE_HEIGHT = 121


def draw_face(edges: np.ndarray, x0: int, y0: int, value: int = 255) -> None:
    """Draw a symmetric face-like edge pattern (in-place).

    A 3-pixel outline of FACE_WIDTH x FACE_HEIGHT with two full-width
    horizontal bars for the eye and mouth lines. The outline alone makes
    1272 pixels and each bar adds 273 more, 1818 in total.
    """
    edges[y0 : y0 + FACE_HEIGHT, x0 : x0 + FACE_WIDTH] = value
    edges[y0 + 3 : y0 + FACE_HEIGHT - 3, x0 + 3 : x0 + FACE_WIDTH - 3] = 0
    edges[y0 + 26 : y0 + 29, x0 : x0 + FACE_WIDTH] = value
    edges[y0 + 86 : y0 + 89, x0 : x0 + FACE_WIDTH] = value


@pytest.fixture
def blank_edges():
    """Empty 400x400 edge map."""
    return np.zeros((400, 400), dtype=np.uint8)


@pytest.fixture
def face_edges():
    """400x400 edge map with one centered face pattern at (152, 104)."""
    edges = np.zeros((400, 400), dtype=np.uint8)
    draw_face(edges, 152, 104)
    return edges


@pytest.fixture
def two_face_edges():
    """400x400 edge map with two disjoint face patterns."""
    edges = np.zeros((400, 400), dtype=np.uint8)
    draw_face(edges, 56, 104)
    draw_face(edges, 232, 104)
    return edges


@pytest.fixture
def checkerboard():
    """Factory for 1-pixel 0/255 checkerboards (very sharp, mid brightness)."""

    def make(height: int, width: int) -> np.ndarray:
        return (np.indices((height, width)).sum(axis=0) % 2 * 255).astype(np.uint8)

    return make
