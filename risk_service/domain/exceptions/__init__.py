"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .scoring import (
    InvalidModelDefinitionError,
    ExtractionError,
    MissingRequiredFeatureError,
    FeatureTypeMismatchError,
    ExecutionError,
    UnsupportedModelTypeError,
    InvalidModelParametersError,
    AnalysisError,
)
from .model import (
    ModelNotFoundException,
    DuplicateModelException,
    ModelNotScorableException,
)
from .assessment import (
    AssessmentNotFoundException,
    InvalidAssessmentRequestException,
)
from .applicant import (
    ApplicantDataProviderException,
    ApplicantDataProviderTimeoutException,
    ApplicantNotFoundException,
)

__all__ = [
    "DomainException",
    "InvalidModelDefinitionError",
    "ExtractionError",
    "MissingRequiredFeatureError",
    "FeatureTypeMismatchError",
    "ExecutionError",
    "UnsupportedModelTypeError",
    "InvalidModelParametersError",
    "AnalysisError",
    "ModelNotFoundException",
    "DuplicateModelException",
    "ModelNotScorableException",
    "AssessmentNotFoundException",
    "InvalidAssessmentRequestException",
    "ApplicantDataProviderException",
    "ApplicantDataProviderTimeoutException",
    "ApplicantNotFoundException",
]
