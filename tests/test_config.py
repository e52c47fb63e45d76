"""Unit tests for configuration and the error taxonomy."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from faceverify.config import Config, DetectionConfig, PipelineConfig
from faceverify.errors import (
    BlurError,
    FaceVerificationError,
    LightingError,
    ModelNotLoadedError,
    MultipleFaceError,
    NoFaceError,
    UserNotFoundError,
    ValidationError,
    status_code_for,
)

ENV_VARS = ["THRESH", "LOG_LEVEL", "MODEL_PATH", "STORE_PATH", "BLUR_THRESHOLD", "MAX_FACES"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_defaults(clean_env):
    config = Config.from_env()

    assert config.thresh == 0.6
    assert config.log_level == "INFO"
    assert config.blur_threshold == 100.0
    assert config.max_faces == 1
    assert config.model_path.name == "arcface.onnx"


def test_config_from_env(clean_env, tmp_path):
    clean_env.setenv("THRESH", "0.75")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("STORE_PATH", str(tmp_path / "store.json"))
    clean_env.setenv("BLUR_THRESHOLD", "50")
    clean_env.setenv("MAX_FACES", "2")

    config = Config.from_env()

    assert config.thresh == 0.75
    assert config.log_level == "DEBUG"
    assert config.store_path == Path(tmp_path / "store.json")
    assert config.blur_threshold == 50.0
    assert config.max_faces == 2


@pytest.mark.parametrize(
    "name,value",
    [
        ("THRESH", "1.5"),
        ("LOG_LEVEL", "LOUD"),
        ("BLUR_THRESHOLD", "-1"),
        ("MAX_FACES", "0"),
    ],
)
def test_config_invalid_env(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ValueError):
        Config.from_env()


def test_pipeline_config_from_env(clean_env):
    """Test that process settings flow into the frozen pipeline tunables."""
    clean_env.setenv("THRESH", "0.7")
    clean_env.setenv("BLUR_THRESHOLD", "80")
    clean_env.setenv("MAX_FACES", "3")

    pipeline = Config.from_env().pipeline_config()

    assert pipeline.similarity_threshold == 0.7
    assert pipeline.blur.blur_threshold == 80.0
    assert pipeline.detection.max_faces == 3
    assert pipeline.detection.edge_map_size == 400


def test_pipeline_config_frozen():
    config = PipelineConfig()

    with pytest.raises(FrozenInstanceError):
        config.similarity_threshold = 0.9


def test_pipeline_config_invalid_threshold():
    with pytest.raises(ValueError):
        PipelineConfig(similarity_threshold=2.0)


def test_detection_config_defaults():
    config = DetectionConfig()

    assert config.min_region_size == 40
    assert config.passes == ((40, 25), (30, 20), (20, 15))
    assert sum(config.edge_kernel) == 0
    weights = (
        config.symmetry_weight
        + config.eye_weight
        + config.mouth_weight
        + config.edge_distribution_weight
        + config.position_weight
    )
    assert weights == pytest.approx(1.0)


# Errors


@pytest.mark.parametrize(
    "error,status",
    [
        (ValidationError("bad"), 400),
        (LightingError("dark", condition="too_dark"), 400),
        (BlurError("blurry"), 400),
        (NoFaceError("none"), 400),
        (MultipleFaceError("many", count=2), 400),
        (UserNotFoundError("missing"), 404),
        (ModelNotLoadedError("loading"), 503),
        (RuntimeError("boom"), 500),
        (None, 500),
    ],
)
def test_status_code_for(error, status):
    assert status_code_for(error) == status


def test_error_to_dict():
    error = MultipleFaceError("Multiple faces detected (2)", count=2)

    assert isinstance(error, FaceVerificationError)
    assert error.to_dict() == {
        "kind": "multiple_faces",
        "message": "Multiple faces detected (2)",
        "details": {"count": 2},
    }
    assert str(error) == "Multiple faces detected (2)"
