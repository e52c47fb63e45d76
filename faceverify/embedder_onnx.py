"""ONNX embedding model for face feature extraction.

This module wraps an ArcFace-style ONNX graph that maps a normalized
112x112 RGB face tensor (NHWC, values in [-1, 1]) to a 512-D feature vector.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import onnxruntime as ort

from faceverify.logging_config import get_logger

logger = get_logger(__name__)


class OnnxEmbeddingModel:
    """Embedding model served by ONNX Runtime.

    The model is opaque: it receives a float32 tensor of shape
    [1, 112, 112, 3] and returns the raw output vector. Normalization of the
    output is left to the caller.

    Attributes:
        model_path: Path to the .onnx file
        session: ONNX Runtime inference session
        input_name: Name of the graph input
        output_name: Name of the graph output

    Example:
        >>> model = OnnxEmbeddingModel("models/arcface.onnx")
        >>> raw = model.infer(to_model_tensor(face_rgb_112))
        >>> raw.shape
        (512,)
    """

    def __init__(
        self,
        model_path: str | Path,
        providers: Optional[list[str]] = None,
    ):
        """Load the ONNX model.

        Args:
            model_path: Path to the .onnx file
            providers: ONNX Runtime execution providers (default: CPU only)

        Raises:
            FileNotFoundError: If the model file does not exist.
            RuntimeError: If the session cannot be created.
        """
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(f"Model file not found at: {self.model_path}")

        providers = providers or ["CPUExecutionProvider"]
        logger.info(f"Loading model from: {self.model_path}")

        options = ort.SessionOptions()
        options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL

        try:
            self.session = ort.InferenceSession(
                str(self.model_path), sess_options=options, providers=providers
            )
        except Exception as e:
            logger.error(f"Failed to load ONNX model: {e}")
            raise RuntimeError(f"Could not load ONNX model: {e}") from e

        self.input_name = self.session.get_inputs()[0].name
        self.output_name = self.session.get_outputs()[0].name

        logger.info(
            f"ONNX model loaded successfully "
            f"(input={self.input_name}, output={self.output_name})"
        )

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """Run the model on one normalized face tensor.

        Args:
            tensor: float32 array of shape [1, 112, 112, 3], values in [-1, 1]

        Returns:
            Raw (unnormalized) embedding, flattened to shape [D].

        Raises:
            ValueError: If the tensor has the wrong shape.
        """
        if tensor.shape != (1, 112, 112, 3):
            raise ValueError(f"Expected tensor shape (1, 112, 112, 3), got {tensor.shape}")

        outputs = self.session.run(
            [self.output_name], {self.input_name: tensor.astype(np.float32)}
        )
        return np.asarray(outputs[0], dtype=np.float32).ravel()

    def info(self) -> dict:
        """Describe graph inputs and outputs."""
        return {
            "inputs": [
                {"name": i.name, "type": i.type, "dims": i.shape}
                for i in self.session.get_inputs()
            ],
            "outputs": [
                {"name": o.name, "type": o.type, "dims": o.shape}
                for o in self.session.get_outputs()
            ],
        }

    def __repr__(self) -> str:
        return f"OnnxEmbeddingModel(path={self.model_path})"
