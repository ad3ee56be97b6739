"""Scoring engine exceptions.

Raised by the feature extractor, model executor and factor analyzer.
None of these are retried: evaluation is deterministic.
"""

from .base import DomainException


class InvalidModelDefinitionError(DomainException):
    """Raised when a model definition breaks its structural invariants."""

    def __init__(self, message: str, model_id: str | None = None):
        super().__init__(
            message=message,
            code="INVALID_MODEL_DEFINITION",
        )
        self.model_id = model_id


class ExtractionError(DomainException):
    """Base class for feature extraction failures."""

    def __init__(self, message: str, code: str = "EXTRACTION_ERROR"):
        super().__init__(message=message, code=code)


class MissingRequiredFeatureError(ExtractionError):
    """Raised when a required feature has no value and no default."""

    def __init__(self, feature_name: str):
        super().__init__(
            message=f"Missing required feature: {feature_name}",
            code="MISSING_REQUIRED_FEATURE",
        )
        self.feature_name = feature_name


class FeatureTypeMismatchError(ExtractionError):
    """Raised when a value cannot be used for a feature's declared type."""

    def __init__(self, feature_name: str, expected: str, actual: str):
        super().__init__(
            message=(
                f"Feature '{feature_name}' expects {expected} "
                f"but received {actual}"
            ),
            code="FEATURE_TYPE_MISMATCH",
        )
        self.feature_name = feature_name
        self.expected = expected
        self.actual = actual


class ExecutionError(DomainException):
    """Base class for model execution failures."""

    def __init__(self, message: str, code: str = "EXECUTION_ERROR"):
        super().__init__(message=message, code=code)


class UnsupportedModelTypeError(ExecutionError):
    """Raised when no evaluation strategy is registered for a model type."""

    def __init__(self, model_type: str):
        super().__init__(
            message=f"Unsupported model type: {model_type}",
            code="UNSUPPORTED_MODEL_TYPE",
        )
        self.model_type = model_type


class InvalidModelParametersError(ExecutionError):
    """Raised when model parameters are missing or malformed for a strategy."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_MODEL_PARAMETERS",
        )


class AnalysisError(DomainException):
    """Raised when factor analysis cannot be performed."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="ANALYSIS_ERROR",
        )
