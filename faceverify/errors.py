"""Error taxonomy for the face verification pipeline.

Every failure raised by the pipeline derives from FaceVerificationError and
carries a stable ``kind`` plus a ``details`` dict with the measured values
that caused it. Callers map kinds to transport-level responses with
status_code_for().
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class FaceVerificationError(Exception):
    """Base class for all pipeline failures.

    Attributes:
        kind: Stable machine-readable error kind
        message: Human-readable reason
        details: Measured values that triggered the failure
    """

    kind = "face_verification_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for API responses or logs."""
        return {"kind": self.kind, "message": self.message, "details": dict(self.details)}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


class ValidationError(FaceVerificationError):
    """Image format, resolution, aspect ratio, or file size rejected."""

    kind = "validation_error"


class LightingError(FaceVerificationError):
    """Image is too dark, too bright, or lacks contrast."""

    kind = "lighting_error"

    def __init__(self, message: str, condition: str, **details: Any):
        super().__init__(message, condition=condition, **details)
        self.condition = condition


class BlurError(FaceVerificationError):
    """Laplacian variance below the sharpness threshold."""

    kind = "blur_error"


class NoFaceError(FaceVerificationError):
    """No face region survived all detection passes."""

    kind = "no_face"


class MultipleFaceError(FaceVerificationError):
    """More face regions than allowed were accepted."""

    kind = "multiple_faces"

    def __init__(self, message: str, count: int, **details: Any):
        super().__init__(message, count=count, **details)
        self.count = count


class DimensionMismatchError(FaceVerificationError):
    """Two vectors being compared have different lengths."""

    kind = "dimension_mismatch"


class EmptyVectorError(FaceVerificationError):
    kind = "empty_vector"


class ZeroVectorError(FaceVerificationError):
    kind = "zero_vector"


class EmbeddingFormatError(FaceVerificationError):
    """Stored embedding could not be decoded or failed validation."""

    kind = "embedding_format"


class ModelNotLoadedError(FaceVerificationError):
    kind = "model_not_loaded"


class UserNotFoundError(FaceVerificationError):
    kind = "user_not_found"


_STATUS_CODES = {
    ValidationError.kind: 400,
    LightingError.kind: 400,
    BlurError.kind: 400,
    NoFaceError.kind: 400,
    MultipleFaceError.kind: 400,
    DimensionMismatchError.kind: 400,
    EmptyVectorError.kind: 400,
    ZeroVectorError.kind: 400,
    EmbeddingFormatError.kind: 400,
    UserNotFoundError.kind: 404,
    ModelNotLoadedError.kind: 503,
}


def status_code_for(error: Optional[BaseException]) -> int:
    """Map an error to an HTTP-style status code.

    Args:
        error: Exception raised by the pipeline

    Returns:
        400 for input problems, 404 for unknown users, 503 when the model is
        not loaded, 500 for anything else.

    Example:
        >>> status_code_for(NoFaceError("No face detected"))
        400
    """
    if isinstance(error, FaceVerificationError):
        return _STATUS_CODES.get(error.kind, 500)
    return 500
