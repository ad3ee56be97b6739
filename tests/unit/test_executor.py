"""
Unit tests for model execution.

These tests verify:
1. Each built-in strategy (linear, logistic, tree ensemble)
2. Determinism and output assembly
3. Strategy selection and the registry
4. Parameter and output validation errors
"""

import math
from dataclasses import replace

import pytest

from risk_service.domain.entities import (
    FeatureDefinition,
    FeatureType,
    InputVector,
    OutputDefinition,
)
from risk_service.domain.exceptions import (
    InvalidModelDefinitionError,
    InvalidModelParametersError,
    UnsupportedModelTypeError,
)
from risk_service.service.scoring import (
    EvaluationResult,
    ModelStrategy,
    CompiledModel,
    StrategyRegistry,
    default_registry,
    compile_model,
    execute,
    extract,
)

from factories import make_reference_model


def vector_of(**values) -> InputVector:
    base = {
        "credit_score": 650.0,
        "annual_income": 60000.0,
        "debt_to_income_ratio": 0.35,
        "employment_status": "employed",
        "owns_home": False,
    }
    base.update(values)
    return InputVector.of(base)


# =============================================================================
# Linear scorecard
# =============================================================================

class TestLinearScorecard:

    def test_strong_applicant_score(self, reference_model, strong_applicant):
        output = execute(reference_model, extract(strong_applicant, reference_model))

        assert output.score == pytest.approx(220.0)
        assert output.tier == "Low"

    def test_weak_applicant_score(self, reference_model, weak_applicant):
        output = execute(reference_model, extract(weak_applicant, reference_model))

        assert output.score == pytest.approx(720.0)
        assert output.tier == "High"

    def test_baseline_vector_scores_offset(self, reference_model):
        output = execute(reference_model, vector_of())
        assert output.score == pytest.approx(520.0)

    def test_category_and_boolean_terms(self, reference_model):
        unemployed = execute(reference_model, vector_of(employment_status="unemployed"))
        homeowner = execute(reference_model, vector_of(owns_home=True))
        unknown = execute(reference_model, vector_of(employment_status="contractor"))

        assert unemployed.score == pytest.approx(670.0)
        assert homeowner.score == pytest.approx(500.0)
        assert unknown.score == pytest.approx(520.0)

    def test_confidence_is_distance_from_threshold(self, reference_model):
        output = execute(reference_model, vector_of(credit_score=550.0, debt_to_income_ratio=0.6))

        # 795 on 0-1000 with the default 0.5 threshold
        assert output.score == pytest.approx(795.0)
        assert output.confidence == pytest.approx((0.795 - 0.5) / 0.5)

    def test_deterministic(self, reference_model, weak_applicant):
        vector = extract(weak_applicant, reference_model)

        first = execute(reference_model, vector)
        second = execute(reference_model, vector)

        assert first.score == second.score
        assert first.confidence == second.confidence

    def test_declared_outputs_only(self, reference_model):
        output = execute(reference_model, vector_of())

        assert set(output.raw_outputs) == {"risk_score", "risk_tier"}
        assert output.get_output("risk_tier") == output.tier
        assert output.execution_time >= 0.0

    def test_extraction_warnings_are_carried(self, reference_model):
        vector = InputVector.of(vector_of().to_dict(), ["something looked off"])

        output = execute(reference_model, vector)

        assert output.warnings == ["something looked off"]
        assert output.has_warnings

    def test_score_outside_range_classifies_by_clamping(self):
        model = make_reference_model(
            parameters={"weights": {"credit_score": 10.0}, "offset": 0.0, "factor": 1.0},
        )

        output = execute(model, vector_of(credit_score=850.0))

        assert output.score == pytest.approx(8500.0)
        assert output.tier == "Very High"
        assert output.confidence == 1.0


# =============================================================================
# Logistic scorecard
# =============================================================================

class TestLogisticScorecard:

    def make_model(self, **parameters):
        params = {
            "intercept": 0.0,
            "weights": {"credit_score": -1.0},
            "scaling": {"credit_score": {"mean": 650.0, "std": 100.0}},
        }
        params.update(parameters)
        return make_reference_model(
            model_type="logistic_scorecard",
            parameters=params,
            outputs=[
                OutputDefinition(name="risk_score"),
                OutputDefinition(name="probability_of_default"),
            ],
        )

    def test_zero_predictor_is_mid_range(self):
        output = execute(self.make_model(), vector_of())

        assert output.score == pytest.approx(500.0)
        assert output.raw_outputs["probability_of_default"] == pytest.approx(0.5)
        assert output.confidence == pytest.approx(0.0)

    def test_score_follows_sigmoid(self):
        output = execute(self.make_model(), vector_of(credit_score=550.0))

        p = 1.0 / (1.0 + math.exp(-1.0))
        assert output.score == pytest.approx(1000.0 * p)
        assert output.tier == "High"

    def test_score_stays_inside_range(self):
        output = execute(self.make_model(), vector_of(credit_score=-100000.0))
        assert 0.0 <= output.score <= 1000.0


# =============================================================================
# Tree ensemble
# =============================================================================

class TestTreeEnsemble:

    def make_model(self, trees, **parameters):
        params = {"base_score": 0.0, "learning_rate": 1.0, "trees": trees}
        params.update(parameters)
        return make_reference_model(model_type="tree_ensemble", parameters=params)

    def test_single_split(self):
        model = self.make_model([
            {
                "feature": "credit_score",
                "threshold": 600.0,
                "left": {"value": 2.0},
                "right": {"value": -2.0},
            },
        ])

        low = execute(model, vector_of(credit_score=550.0))
        high = execute(model, vector_of(credit_score=700.0))

        assert low.score == pytest.approx(1000.0 / (1.0 + math.exp(-2.0)))
        assert high.score == pytest.approx(1000.0 / (1.0 + math.exp(2.0)))
        assert low.confidence == 1.0

    def test_categorical_split_and_agreement(self):
        model = self.make_model([
            {
                "feature": "employment_status",
                "categories": ["unemployed"],
                "left": {"value": 1.5},
                "right": {"value": -0.5},
            },
            {
                "feature": "owns_home",
                "threshold": 0.5,
                "left": {"value": 0.5},
                "right": {"value": -0.5},
            },
        ])

        output = execute(model, vector_of(employment_status="unemployed", owns_home=True))

        # z = 1.5 - 0.5 = 1.0; only the first tree agrees with the decision
        assert output.raw_outputs["risk_score"] == pytest.approx(
            1000.0 / (1.0 + math.exp(-1.0))
        )
        assert output.confidence == pytest.approx(0.5)

    def test_split_on_undeclared_feature_is_rejected(self):
        model = self.make_model([
            {
                "feature": "shoe_size",
                "threshold": 10.0,
                "left": {"value": 1.0},
                "right": {"value": 0.0},
            },
        ])

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of())

    @pytest.mark.parametrize(
        "split",
        [
            {"feature": "employment_status", "threshold": 1.0},
            {"feature": "credit_score", "categories": ["700"]},
        ],
    )
    def test_split_must_match_feature_type(self, split):
        model = self.make_model([
            dict(split, left={"value": 1.0}, right={"value": 0.0}),
        ])

        with pytest.raises(InvalidModelParametersError, match="employment_status|credit_score"):
            compile_model(model)

    def test_categorical_threshold_split_never_reaches_evaluation(self):
        model = self.make_model([
            {
                "feature": "employment_status",
                "threshold": 0.5,
                "left": {"value": 1.0},
                "right": {"value": 0.0},
            },
        ])

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of(employment_status="unemployed"))

    def test_malformed_tree_is_rejected(self):
        model = self.make_model([{"feature": "credit_score", "left": {"value": 1.0}}])

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of())

    def test_empty_ensemble_is_rejected(self):
        with pytest.raises(InvalidModelParametersError):
            execute(self.make_model([]), vector_of())


# =============================================================================
# Dispatch and validation
# =============================================================================

class TestDispatch:

    def test_unknown_model_type(self):
        model = make_reference_model(model_type="neural_network")

        with pytest.raises(UnsupportedModelTypeError) as exc_info:
            execute(model, vector_of())

        assert exc_info.value.code == "UNSUPPORTED_MODEL_TYPE"

    def test_scorecard_without_weights(self):
        model = make_reference_model(parameters={"intercept": 1.0})

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of())

    def test_weight_on_undeclared_feature(self):
        model = make_reference_model(parameters={"weights": {"shoe_size": 1.0}})

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of())

    def test_numeric_weight_on_categorical_feature(self):
        model = make_reference_model(parameters={"weights": {"employment_status": 1.0}})

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of())

    def test_declared_output_not_produced(self):
        model = make_reference_model(
            outputs=[OutputDefinition(name="risk_score"), OutputDefinition(name="loss_given_default")],
        )

        with pytest.raises(InvalidModelParametersError):
            execute(model, vector_of())

    def test_invalid_score_range(self):
        model = make_reference_model(score_range=(1000.0, 0.0))

        with pytest.raises(InvalidModelDefinitionError):
            execute(model, vector_of())

    def test_missing_risk_score_output(self):
        model = make_reference_model(outputs=[OutputDefinition(name="risk_tier")])

        with pytest.raises(InvalidModelDefinitionError):
            execute(model, vector_of())

    def test_duplicate_feature_names(self):
        feature = FeatureDefinition(name="credit_score", data_type=FeatureType.NUMERIC)
        model = make_reference_model(features=[feature, feature])

        with pytest.raises(InvalidModelDefinitionError):
            execute(model, vector_of())

    def test_inverted_feature_range(self, reference_model, weak_applicant):
        features = list(reference_model.features)
        features[0] = replace(features[0], range=(850.0, 300.0))
        model = make_reference_model(features=features)

        with pytest.raises(InvalidModelDefinitionError, match="credit_score"):
            model.validate()
        with pytest.raises(InvalidModelDefinitionError):
            extract(weak_applicant, model)

    def test_single_point_feature_range_is_allowed(self):
        features = list(make_reference_model().features)
        features[0] = replace(features[0], range=(700.0, 700.0))

        make_reference_model(features=features).validate()


class TestStrategyRegistry:

    def test_default_registry_has_builtins(self):
        assert default_registry().model_types == [
            "linear_scorecard",
            "logistic_scorecard",
            "tree_ensemble",
        ]

    def test_custom_strategy(self):
        class ConstantModel(CompiledModel):
            def evaluate(self, vector):
                return EvaluationResult(score=900.0, confidence=0.9)

        class ConstantStrategy(ModelStrategy):
            name = "constant"

            def compile(self, model):
                return ConstantModel(model)

        registry = default_registry()
        registry.register("constant", ConstantStrategy())
        model = make_reference_model(model_type="constant")

        output = execute(model, vector_of(), registry=registry)

        assert "constant" in registry
        assert output.score == 900.0
        assert output.tier == "Very High"
        assert output.raw_outputs["risk_score"] == 900.0

    def test_registries_are_independent(self):
        registry = StrategyRegistry()
        assert "linear_scorecard" not in registry
        assert "linear_scorecard" in default_registry()
