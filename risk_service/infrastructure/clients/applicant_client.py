"""HTTP implementation of ApplicantDataProvider."""

import asyncio

import httpx
import structlog

from risk_service.core.config import settings
from risk_service.core.metrics import (
    record_applicant_fetch_failure,
    record_applicant_fetch_success,
    track_applicant_fetch_latency,
)
from risk_service.domain.entities import ApplicantData
from risk_service.domain.exceptions import (
    ApplicantDataProviderException,
    ApplicantDataProviderTimeoutException,
    ApplicantNotFoundException,
)
from risk_service.domain.interfaces import ApplicantDataProvider

logger = structlog.get_logger(__name__)


class HttpApplicantDataProvider(ApplicantDataProvider):
    """
    HTTP client for the Applicant API.

    Fetches applicant records with retry logic and proper error handling.
    Only timeouts and transport errors are retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.applicant_api_url
        self._timeout = timeout or settings.applicant_api_timeout
        self._max_retries = max_retries or settings.applicant_api_max_retries
        self._transport = transport

    async def get_applicant(self, applicant_id: str) -> ApplicantData:
        """
        Fetch an applicant record.

        Implements retry logic with exponential backoff.
        """
        url = f"{self._base_url}/applicants/{applicant_id}"

        last_exception = None

        for attempt in range(self._max_retries):
            try:
                with track_applicant_fetch_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout,
                        transport=self._transport,
                    ) as client:
                        response = await client.get(url)

                        if response.status_code == 404:
                            record_applicant_fetch_failure("not_found")
                            raise ApplicantNotFoundException(applicant_id)

                        if response.status_code >= 400:
                            record_applicant_fetch_failure("error")
                            raise ApplicantDataProviderException(
                                message=f"Applicant API error: {response.text}",
                                status_code=response.status_code,
                            )

                        applicant = self._parse_applicant(applicant_id, response)
                        record_applicant_fetch_success()
                        return applicant

            except httpx.TimeoutException:
                record_applicant_fetch_failure("timeout")
                last_exception = ApplicantDataProviderTimeoutException()
                logger.warning(
                    "applicant_api_timeout",
                    applicant_id=applicant_id,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except (ApplicantNotFoundException, ApplicantDataProviderException):
                raise
            except httpx.HTTPError as e:
                record_applicant_fetch_failure("error")
                last_exception = ApplicantDataProviderException(
                    message=f"Unexpected error: {str(e)}",
                )
                logger.error(
                    "applicant_api_error",
                    applicant_id=applicant_id,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or ApplicantDataProviderException("Failed to fetch applicant")

    def _parse_applicant(self, applicant_id: str, response: httpx.Response) -> ApplicantData:
        """Parse the raw API response into an ApplicantData snapshot."""
        try:
            data = response.json()
            payload = data.get("applicant", data)
            payload.setdefault("applicant_id", applicant_id)
            return ApplicantData.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            record_applicant_fetch_failure("invalid_payload")
            raise ApplicantDataProviderException(
                message=f"Malformed applicant payload: {str(e)}",
            )
