"""
Unit tests for feature extraction.

These tests verify:
1. Values are looked up from the applicant records and typed
2. Derived fields (age, credit history, ratios)
3. Defaults, neutral values and the warnings they produce
4. Clamping and unknown categories
5. Structural errors (missing required features, type mismatches)
"""

from datetime import date, datetime

import pytest

from risk_service.domain.entities import (
    ApplicantData,
    FeatureDefinition,
    FeatureType,
    FinancialInfo,
    PersonalInfo,
)
from risk_service.domain.exceptions import (
    FeatureTypeMismatchError,
    InvalidModelDefinitionError,
    MissingRequiredFeatureError,
)
from risk_service.service.scoring.features import (
    calculate_age,
    derive_fields,
    extract,
)

from factories import make_applicant, make_reference_model


def model_with(*features: FeatureDefinition):
    return make_reference_model(
        features=list(features),
        parameters={"weights": {features[0].name: 1.0}} if features else {},
    )


# =============================================================================
# Lookup and typing
# =============================================================================

class TestExtract:

    def test_extracts_one_value_per_feature_in_order(self, reference_model, strong_applicant):
        vector = extract(strong_applicant, reference_model)

        assert vector.names() == [
            "credit_score",
            "annual_income",
            "debt_to_income_ratio",
            "employment_status",
            "owns_home",
        ]
        assert vector["credit_score"] == 750.0
        assert isinstance(vector["credit_score"], float)
        assert vector["annual_income"] == 120000.0
        assert vector["debt_to_income_ratio"] == pytest.approx(0.2)
        assert vector["employment_status"] == "employed"
        assert vector["owns_home"] is False

    def test_applicant_is_not_mutated(self, reference_model, strong_applicant):
        before = repr(strong_applicant)
        extract(strong_applicant, reference_model)
        assert repr(strong_applicant) == before

    def test_clean_applicant_has_no_warnings(self, reference_model, strong_applicant):
        vector = extract(strong_applicant, reference_model)
        assert vector.warnings == ()

    def test_additional_attributes_are_used(self, reference_model):
        applicant = make_applicant(owns_home=True)
        vector = extract(applicant, reference_model)
        assert vector["owns_home"] is True

    def test_invalid_model_is_rejected(self, strong_applicant):
        model = make_reference_model(features=[])
        with pytest.raises(InvalidModelDefinitionError):
            extract(strong_applicant, model)


# =============================================================================
# Missing values
# =============================================================================

class TestMissingValues:

    def test_missing_required_without_default_raises(self, reference_model):
        applicant = make_applicant(credit_score=None)

        with pytest.raises(MissingRequiredFeatureError) as exc_info:
            extract(applicant, reference_model)

        assert exc_info.value.code == "MISSING_REQUIRED_FEATURE"
        assert "credit_score" in exc_info.value.message

    def test_missing_required_with_default_uses_default_and_warns(self, strong_applicant):
        model = model_with(
            FeatureDefinition(
                name="recent_inquiries",
                data_type=FeatureType.NUMERIC,
                required=True,
                default_value=2,
            ),
        )

        vector = extract(strong_applicant, model)

        assert vector["recent_inquiries"] == 2.0
        assert len(vector.warnings) == 1
        assert "recent_inquiries" in vector.warnings[0]

    def test_missing_optional_uses_declared_default_silently(self, reference_model):
        applicant = make_applicant(annual_income=None)

        vector = extract(applicant, reference_model)

        assert vector["annual_income"] == 50000.0
        assert vector.warnings == ()

    def test_missing_optional_without_default_is_neutral_with_warning(self, strong_applicant):
        model = model_with(
            FeatureDefinition(name="savings_balance", data_type=FeatureType.NUMERIC),
            FeatureDefinition(name="industry", data_type=FeatureType.CATEGORICAL),
            FeatureDefinition(name="has_guarantor", data_type=FeatureType.BOOLEAN),
        )

        vector = extract(strong_applicant, model)

        assert vector["savings_balance"] == 0.0
        assert vector["industry"] == ""
        assert vector["has_guarantor"] is False
        assert len(vector.warnings) == 3


# =============================================================================
# Constraints
# =============================================================================

class TestConstraints:

    def test_value_above_range_is_clamped(self, reference_model):
        applicant = make_applicant(credit_score=900)

        vector = extract(applicant, reference_model)

        assert vector["credit_score"] == 850.0
        assert any("clamped" in w for w in vector.warnings)

    def test_value_below_range_is_clamped(self, reference_model):
        applicant = make_applicant(debt_to_income_ratio=-0.1)

        vector = extract(applicant, reference_model)

        assert vector["debt_to_income_ratio"] == 0.0
        assert any("debt_to_income_ratio" in w for w in vector.warnings)

    def test_unknown_category_is_kept_with_warning(self, reference_model):
        applicant = make_applicant(employment_status="contractor")

        vector = extract(applicant, reference_model)

        assert vector["employment_status"] == "contractor"
        assert any("unknown category" in w for w in vector.warnings)

    def test_type_mismatch_raises(self, strong_applicant):
        applicant = make_applicant(owns_home="yes")
        model = make_reference_model()

        with pytest.raises(FeatureTypeMismatchError) as exc_info:
            extract(applicant, model)

        assert "owns_home" in exc_info.value.message


# =============================================================================
# Derived fields
# =============================================================================

class TestDerivedFields:

    def test_age_before_birthday(self):
        assert calculate_age(date(1990, 6, 15), datetime(2024, 6, 14)) == 33.0

    def test_age_on_birthday(self):
        assert calculate_age(date(1990, 6, 15), datetime(2024, 6, 15)) == 34.0

    def test_credit_history_years(self, strong_applicant):
        derived = derive_fields(strong_applicant, datetime(2024, 1, 1))
        assert derived["credit_history_years"] == 8.0

    def test_debt_to_income_derived_when_absent(self):
        applicant = ApplicantData(
            applicant_id="a1",
            financial=FinancialInfo(annual_income=100000, total_debt=25000),
        )

        derived = derive_fields(applicant, datetime(2024, 1, 1))

        assert derived["debt_to_income_ratio"] == pytest.approx(0.25)

    def test_reported_debt_to_income_is_not_overridden(self):
        applicant = ApplicantData(
            applicant_id="a1",
            financial=FinancialInfo(
                annual_income=100000,
                total_debt=25000,
                debt_to_income_ratio=0.4,
            ),
        )

        derived = derive_fields(applicant, datetime(2024, 1, 1))

        assert "debt_to_income_ratio" not in derived

    def test_no_derived_ratio_without_income(self):
        applicant = ApplicantData(
            applicant_id="a1",
            financial=FinancialInfo(annual_income=0, total_debt=25000),
        )
        assert "debt_to_income_ratio" not in derive_fields(applicant, datetime(2024, 1, 1))

    def test_age_feature_uses_evaluation_time(self):
        applicant = ApplicantData(
            applicant_id="a1",
            personal=PersonalInfo(date_of_birth=date(2000, 1, 1)),
        )
        model = model_with(
            FeatureDefinition(name="age", data_type=FeatureType.NUMERIC, required=True),
        )

        vector = extract(applicant, model, evaluation_time=datetime(2025, 6, 1))

        assert vector["age"] == 25.0
