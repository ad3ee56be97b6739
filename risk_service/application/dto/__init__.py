"""Data Transfer Objects"""

from .assessment import (
    AssessmentRequest,
    AssessmentExplanation,
    AssessmentHistoryResponse,
)

__all__ = [
    "AssessmentRequest",
    "AssessmentExplanation",
    "AssessmentHistoryResponse",
]
