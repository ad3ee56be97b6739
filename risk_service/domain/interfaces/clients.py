"""External client interfaces."""

from abc import ABC, abstractmethod

from risk_service.domain.entities import ApplicantData


class ApplicantDataProvider(ABC):
    """
    Abstract source of applicant records.

    Supplies a fully populated ApplicantData; acquisition and
    normalization from upstream systems happen behind this port.
    """

    @abstractmethod
    async def get_applicant(self, applicant_id: str) -> ApplicantData:
        """
        Fetch the current record for an applicant.

        Args:
            applicant_id: The applicant's identifier

        Returns:
            The applicant snapshot

        Raises:
            ApplicantNotFoundException: If the applicant doesn't exist
            ApplicantDataProviderException: If the provider returns an error
            ApplicantDataProviderTimeoutException: If the request times out
        """
        ...
