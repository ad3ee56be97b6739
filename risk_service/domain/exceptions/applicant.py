"""Applicant data provider exceptions."""

from .base import DomainException


class ApplicantDataProviderException(DomainException):
    """Raised when the applicant data provider returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="APPLICANT_PROVIDER_ERROR",
        )
        self.status_code = status_code


class ApplicantDataProviderTimeoutException(ApplicantDataProviderException):
    """Raised when the applicant data provider times out."""

    def __init__(self):
        super().__init__(
            message="Applicant data provider request timed out",
            status_code=None,
        )
        self.code = "APPLICANT_PROVIDER_TIMEOUT"


class ApplicantNotFoundException(DomainException):
    """Raised when an applicant is not known to the provider."""

    def __init__(self, applicant_id: str):
        super().__init__(
            message=f"Applicant not found: {applicant_id}",
            code="APPLICANT_NOT_FOUND",
        )
        self.applicant_id = applicant_id
