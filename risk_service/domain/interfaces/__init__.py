"""
Domain Interfaces (Ports)
"""

from .repositories import ModelRepository, AssessmentRepository
from .clients import ApplicantDataProvider

__all__ = [
    "ModelRepository",
    "AssessmentRepository",
    "ApplicantDataProvider",
]
