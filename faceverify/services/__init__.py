"""High-level services for the face verification pipeline.

This package contains the service that orchestrates validation,
face location, embedding, and matching.
"""

from faceverify.services.verification import (
    FaceVerificationService,
    RegistrationResult,
    VerificationResult,
)

__all__ = [
    "FaceVerificationService",
    "RegistrationResult",
    "VerificationResult",
]
