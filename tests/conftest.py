"""Shared fixtures for unit and integration tests."""

import pytest

from risk_service.domain.entities import ApplicantData, RiskModel

from factories import make_applicant, make_reference_model


@pytest.fixture
def reference_model() -> RiskModel:
    return make_reference_model()


@pytest.fixture
def strong_applicant() -> ApplicantData:
    """Scores 220 on the reference model (Low)."""
    return make_applicant()


@pytest.fixture
def weak_applicant() -> ApplicantData:
    """Scores 720 on the reference model (High)."""
    return make_applicant(
        applicant_id="applicant_weak",
        credit_score=550,
        debt_to_income_ratio=0.6,
    )
