"""Unit tests for pipeline data structures."""

from __future__ import annotations

import numpy as np
import pytest

from faceverify.codec import OpenCVImageCodec
from faceverify.interfaces import EmbeddingModel, ImageCodec, Region


def test_region_properties():
    region = Region(x=10, y=20, width=40, height=80, size=640, density=0.2)

    assert region.area == 3200
    assert region.center == (29.5, 59.5)
    assert region.aspect_ratio == pytest.approx(0.5)
    assert region.face_score == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0},
        {"height": -5},
        {"density": 1.5},
        {"density": -0.1},
        {"face_score": 1.2},
    ],
)
def test_region_validation(kwargs):
    params = dict(x=0, y=0, width=10, height=10, size=10, density=0.1)
    params.update(kwargs)

    with pytest.raises(ValueError):
        Region(**params)


def test_codec_satisfies_protocol():
    assert isinstance(OpenCVImageCodec(), ImageCodec)


def test_model_protocol():
    class ConstantModel:
        def infer(self, tensor: np.ndarray) -> np.ndarray:
            return np.ones(512, dtype=np.float32)

    assert isinstance(ConstantModel(), EmbeddingModel)
