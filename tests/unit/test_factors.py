"""
Unit tests for counterfactual factor analysis.

These tests verify:
1. Impacts, directions and score deltas on the reference model
2. Baseline derivation and caller-supplied baselines
3. Sensitivity curves and categorical value tables
4. Ranking, category importance and parallel evaluation
5. The end-to-end strong vs weak applicant scenario
"""

import pytest

from risk_service.domain.entities import ImpactDirection, InputVector
from risk_service.domain.exceptions import AnalysisError
from risk_service.service.scoring import (
    ScoringSettings,
    analyze,
    derive_baseline,
    execute,
    extract,
    resolve_baseline,
    sample_points,
)

from factories import make_applicant, make_reference_model


def run(model, applicant, **kwargs):
    vector = extract(applicant, model)
    output = execute(model, vector)
    return vector, output, analyze(model, vector, output, **kwargs)


# =============================================================================
# Impacts
# =============================================================================

class TestImpacts:

    def test_weak_applicant_factors(self, reference_model, weak_applicant):
        _, output, analysis = run(reference_model, weak_applicant)

        credit = analysis.get_factor("credit_score")
        dti = analysis.get_factor("debt_to_income_ratio")
        income = analysis.get_factor("annual_income")
        employment = analysis.get_factor("employment_status")

        assert credit.impact == pytest.approx(-0.15)
        assert credit.direction == ImpactDirection.NEGATIVE
        assert dti.impact == pytest.approx(-0.125)
        assert dti.direction == ImpactDirection.NEGATIVE
        assert income.impact == pytest.approx(0.075)
        assert income.direction == ImpactDirection.POSITIVE
        assert employment.direction == ImpactDirection.NEUTRAL
        assert analysis.score == output.score

    def test_factors_follow_declaration_order(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        assert [f.name for f in analysis.factors] == reference_model.feature_names
        assert list(analysis.impact_values) == reference_model.feature_names

    def test_counterfactual_round_trip(self, reference_model, weak_applicant):
        vector, output, analysis = run(reference_model, weak_applicant)
        span = reference_model.score_span

        for name in reference_model.feature_names:
            rescored = execute(
                reference_model, vector.replace(name, analysis.baseline[name])
            ).score
            assert rescored == analysis.counterfactual_scores[name]

            impact = analysis.get_factor(name).impact
            assert impact == pytest.approx(-(output.score - rescored) / span)

    def test_linear_deltas_decompose_score(self, reference_model, weak_applicant):
        _, output, analysis = run(reference_model, weak_applicant)

        baseline_score = execute(
            reference_model, InputVector.of(analysis.baseline)
        ).score
        assert baseline_score + sum(analysis.score_deltas.values()) == pytest.approx(output.score)

    def test_impacts_are_bounded(self, weak_applicant):
        model = make_reference_model(
            parameters={"weights": {"credit_score": -10.0}, "offset": 0.0, "factor": 1.0},
        )

        _, _, analysis = run(model, weak_applicant)

        assert -1.0 <= analysis.get_factor("credit_score").impact <= 1.0

    def test_factor_carries_category_and_value(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        credit = analysis.get_factor("credit_score")
        assert credit.category == "credit"
        assert credit.value == 550.0
        assert credit.description == "credit score"

    def test_neutral_epsilon_is_configurable(self, reference_model, weak_applicant):
        settings = ScoringSettings(neutral_epsilon=0.1)

        _, _, analysis = run(reference_model, weak_applicant, settings=settings)

        assert analysis.get_factor("annual_income").direction == ImpactDirection.NEUTRAL
        assert analysis.get_factor("credit_score").direction == ImpactDirection.NEGATIVE


# =============================================================================
# Baselines
# =============================================================================

class TestBaseline:

    def test_derived_from_population_then_defaults(self, reference_model):
        baseline = derive_baseline(reference_model)

        assert baseline == {
            "credit_score": 650.0,
            "annual_income": 60000.0,
            "debt_to_income_ratio": 0.35,
            "employment_status": "employed",
            "owns_home": False,
        }

    def test_required_feature_without_source(self):
        model = make_reference_model(metadata={})

        with pytest.raises(AnalysisError):
            derive_baseline(model)

    def test_optional_without_source_is_neutral(self):
        model = make_reference_model(
            metadata={"population_baseline": {"credit_score": 700, "debt_to_income_ratio": 0.3}},
        )

        baseline = derive_baseline(model)

        assert baseline["annual_income"] == 50000.0
        assert baseline["credit_score"] == 700.0

    def test_supplied_baseline_fills_optional_gaps(self, reference_model):
        baseline = resolve_baseline(
            reference_model,
            {"credit_score": 600, "debt_to_income_ratio": 0.5},
        )

        assert baseline["credit_score"] == 600.0
        assert baseline["annual_income"] == 60000.0

    def test_supplied_baseline_missing_required(self, reference_model, weak_applicant):
        with pytest.raises(AnalysisError):
            run(reference_model, weak_applicant, baseline={"credit_score": 650})

    def test_supplied_baseline_with_wrong_type(self, reference_model, weak_applicant):
        with pytest.raises(AnalysisError):
            run(
                reference_model,
                weak_applicant,
                baseline={"credit_score": "high", "debt_to_income_ratio": 0.35},
            )

    def test_supplied_baseline_changes_impacts(self, reference_model, weak_applicant):
        _, _, analysis = run(
            reference_model,
            weak_applicant,
            baseline={"credit_score": 550, "debt_to_income_ratio": 0.6},
        )

        assert analysis.get_factor("credit_score").direction == ImpactDirection.NEUTRAL
        assert analysis.get_factor("debt_to_income_ratio").direction == ImpactDirection.NEUTRAL

    def test_input_vector_as_baseline(self, reference_model, weak_applicant, strong_applicant):
        reference = extract(strong_applicant, reference_model)

        _, output, analysis = run(reference_model, weak_applicant, baseline=reference)

        assert analysis.baseline["credit_score"] == 750.0
        assert analysis.counterfactual_scores["credit_score"] == pytest.approx(output.score - 300.0)

    def test_vector_missing_feature(self, reference_model, weak_applicant):
        vector = extract(weak_applicant, reference_model)
        output = execute(reference_model, vector)
        partial = InputVector.of({"credit_score": 550.0})

        with pytest.raises(AnalysisError):
            analyze(reference_model, partial, output)


# =============================================================================
# Sensitivity and categorical analysis
# =============================================================================

class TestSensitivity:

    def test_sample_points(self):
        points = sample_points(0.0, 1.0, 5)
        assert points == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])
        assert points[-1] == 1.0

    def test_curves_for_ranged_numeric_features(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        assert set(analysis.continuous_factors) == {
            "credit_score",
            "annual_income",
            "debt_to_income_ratio",
        }
        curve = analysis.continuous_factors["credit_score"].sensitivity
        xs = [x for x, _ in curve]
        assert len(curve) == 10
        assert xs == sorted(xs)
        assert xs[0] == 300.0
        assert xs[-1] == 850.0
        # Higher credit score always lowers risk on this model
        ys = [y for _, y in curve]
        assert ys == sorted(ys, reverse=True)
        assert curve[-1][1] == pytest.approx(270.0)

    def test_sample_count_is_configurable(self, reference_model, weak_applicant):
        settings = ScoringSettings(sensitivity_samples=4)

        _, _, analysis = run(reference_model, weak_applicant, settings=settings)

        assert len(analysis.continuous_factors["debt_to_income_ratio"].sensitivity) == 4

    def test_actionable_flag_is_carried(self, weak_applicant):
        model = make_reference_model()
        _, _, analysis = run(model, weak_applicant)

        assert analysis.continuous_factors["credit_score"].actionable is True

    def test_categorical_value_impacts(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        categorical = analysis.categorical_factors["employment_status"]
        assert categorical.value == "employed"
        assert categorical.value_impacts["employed"] == pytest.approx(0.0)
        assert categorical.value_impacts["self_employed"] == pytest.approx(-0.02)
        assert categorical.value_impacts["unemployed"] == pytest.approx(-0.15)

    def test_off_catalog_value_is_reported(self, reference_model):
        applicant = make_applicant(employment_status="contractor")

        _, _, analysis = run(reference_model, applicant)

        assert "contractor" in analysis.categorical_factors["employment_status"].value_impacts

    def test_booleans_have_no_extra_analysis(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        assert "owns_home" not in analysis.continuous_factors
        assert "owns_home" not in analysis.categorical_factors


# =============================================================================
# Ranking
# =============================================================================

class TestRanking:

    def test_top_factors(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        assert [f.name for f in analysis.top_factors(3)] == [
            "credit_score",
            "debt_to_income_ratio",
            "annual_income",
        ]
        assert analysis.top_factors(0) == []
        assert len(analysis.top_factors(50)) == 5

    def test_ties_keep_declaration_order(self, reference_model):
        applicant = make_applicant(credit_score=650, debt_to_income_ratio=0.35, annual_income=60000)

        _, _, analysis = run(reference_model, applicant)

        assert [f.name for f in analysis.top_factors(5)] == reference_model.feature_names

    def test_category_importance(self, reference_model, weak_applicant):
        _, _, analysis = run(reference_model, weak_applicant)

        importance = analysis.category_importance()

        assert sum(importance.values()) == pytest.approx(1.0)
        assert importance["credit"] == pytest.approx(0.15 / 0.35)
        assert importance["debt"] == pytest.approx(0.125 / 0.35)
        assert importance["employment"] == pytest.approx(0.0)

    def test_category_importance_all_neutral(self, reference_model):
        applicant = make_applicant(credit_score=650, debt_to_income_ratio=0.35, annual_income=60000)

        _, _, analysis = run(reference_model, applicant)

        assert set(analysis.category_importance().values()) == {0.0}


# =============================================================================
# Parallel evaluation
# =============================================================================

def test_parallel_matches_sequential(reference_model, weak_applicant):
    _, _, sequential = run(reference_model, weak_applicant)
    _, _, parallel = run(
        reference_model,
        weak_applicant,
        settings=ScoringSettings(analysis_max_workers=4),
    )

    assert [f.name for f in parallel.factors] == [f.name for f in sequential.factors]
    assert parallel.impact_values == sequential.impact_values
    assert parallel.counterfactual_scores == sequential.counterfactual_scores
    assert (
        parallel.continuous_factors["credit_score"].sensitivity
        == sequential.continuous_factors["credit_score"].sensitivity
    )


# =============================================================================
# End-to-end scenario
# =============================================================================

def test_strong_applicant_scores_lower_risk_than_weak(
    reference_model,
    strong_applicant,
    weak_applicant,
):
    _, strong_output, _ = run(reference_model, strong_applicant)
    _, weak_output, weak_analysis = run(reference_model, weak_applicant)

    assert strong_output.score < weak_output.score

    top = {f.name: f for f in weak_analysis.top_factors(3)}
    assert "credit_score" in top
    assert "debt_to_income_ratio" in top
    assert top["credit_score"].direction == ImpactDirection.NEGATIVE
    assert top["debt_to_income_ratio"].direction == ImpactDirection.NEGATIVE
