"""Assessment-related domain exceptions."""

from .base import DomainException


class AssessmentNotFoundException(DomainException):
    """Raised when an assessment cannot be found."""

    def __init__(self, assessment_id: str):
        super().__init__(
            message=f"Assessment not found: {assessment_id}",
            code="ASSESSMENT_NOT_FOUND",
        )
        self.assessment_id = assessment_id


class InvalidAssessmentRequestException(DomainException):
    """Raised when an assessment request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_ASSESSMENT_REQUEST",
        )
