"""Repository implementations."""

from .memory import InMemoryAssessmentRepository, InMemoryModelRepository

__all__ = [
    "InMemoryAssessmentRepository",
    "InMemoryModelRepository",
]
