"""Application Services - Use case orchestration."""

from .assessment_service import AssessmentService
from .model_service import ModelService

__all__ = [
    "AssessmentService",
    "ModelService",
]
