"""
Fixtures for integration tests.

Provides:
- Test client for the FastAPI app
- Mock applicant provider backed by a dict of applicants
- Fresh in-memory model and assessment stores per test
"""

from typing import AsyncGenerator, Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from risk_service.main import app
from risk_service.core.dependencies import (
    get_applicant_provider,
    get_assessment_repository,
    get_model_repository,
)
from risk_service.domain.entities import ApplicantData
from risk_service.domain.exceptions import (
    ApplicantDataProviderException,
    ApplicantNotFoundException,
)
from risk_service.domain.interfaces import ApplicantDataProvider
from risk_service.infrastructure.repositories import (
    InMemoryAssessmentRepository,
    InMemoryModelRepository,
)

from factories import make_applicant, model_payload


# =============================================================================
# Mock Clients
# =============================================================================

class MockApplicantDataProvider(ApplicantDataProvider):
    """Mock provider that serves applicants from a dict."""

    def __init__(
        self,
        applicants: Optional[Dict[str, ApplicantData]] = None,
        fail_mode: bool = False,
    ):
        self.applicants = applicants or {}
        self.fail_mode = fail_mode
        self.call_count = 0

    async def get_applicant(self, applicant_id: str) -> ApplicantData:
        self.call_count += 1

        if self.fail_mode:
            raise ApplicantDataProviderException(
                message="Applicant API unavailable",
                status_code=500,
            )

        applicant = self.applicants.get(applicant_id)
        if applicant is None:
            raise ApplicantNotFoundException(applicant_id)
        return applicant


def default_applicants() -> Dict[str, ApplicantData]:
    return {
        "applicant_strong": make_applicant(),
        "applicant_weak": make_applicant(
            applicant_id="applicant_weak",
            credit_score=550,
            debt_to_income_ratio=0.6,
        ),
        "applicant_no_credit": make_applicant(
            applicant_id="applicant_no_credit",
            credit_score=None,
        ),
    }


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_applicant_provider() -> MockApplicantDataProvider:
    """Create a mock applicant provider with the standard applicants."""
    return MockApplicantDataProvider(default_applicants())


@pytest.fixture
def failing_applicant_provider() -> MockApplicantDataProvider:
    """Create an applicant provider that always fails."""
    return MockApplicantDataProvider(fail_mode=True)


# =============================================================================
# App Client Fixtures
# =============================================================================

async def _client_with(provider: ApplicantDataProvider) -> AsyncGenerator[AsyncClient, None]:
    model_repo = InMemoryModelRepository()
    assessment_repo = InMemoryAssessmentRepository()

    app.dependency_overrides[get_model_repository] = lambda: model_repo
    app.dependency_overrides[get_assessment_repository] = lambda: assessment_repo
    app.dependency_overrides[get_applicant_provider] = lambda: provider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    mock_applicant_provider: MockApplicantDataProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses empty in-memory model and assessment stores
    - Mocks the applicant API with the standard applicants
    """
    async for ac in _client_with(mock_applicant_provider):
        yield ac


@pytest_asyncio.fixture
async def client_with_failing_provider(
    failing_applicant_provider: MockApplicantDataProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the applicant API always fails."""
    async for ac in _client_with(failing_applicant_provider):
        yield ac


@pytest_asyncio.fixture
async def registered_client(client: AsyncClient) -> AsyncClient:
    """A client with the reference model already registered and active."""
    response = await client.post("/v1/models", json=model_payload())
    assert response.status_code == 201
    return client


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def weak_request() -> dict:
    return {"applicant_id": "applicant_weak", "model_id": "retail-linear"}


@pytest.fixture
def strong_request() -> dict:
    return {"applicant_id": "applicant_strong", "model_id": "retail-linear"}
