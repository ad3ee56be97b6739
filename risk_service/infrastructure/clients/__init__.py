"""External API client implementations."""

from .applicant_client import HttpApplicantDataProvider

__all__ = [
    "HttpApplicantDataProvider",
]
