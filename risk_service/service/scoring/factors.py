"""
Factor Analysis for the Risk Scoring Engine.

Decomposes a score into per-feature contributions using counterfactual
evaluation: each feature in turn is reset to its baseline value while all
others keep the applicant's actual values, and the model is re-scored.

    delta  = actual_score - counterfactual_score
    impact = clamp(-delta / (score_max - score_min), -1, 1)

Higher scores mean higher risk, so a feature that pushed the score up has
a negative impact (Negative direction, risk-increasing).

Also produces:
- Sensitivity curves for numeric features with a declared range
- Per-value impact tables for categorical features with a catalog

Every re-evaluation reuses the already-extracted input vector with a single
entry swapped; feature extraction is never re-run.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import structlog

from risk_service.domain.entities import (
    CategoricalFactorAnalysis,
    ContinuousFactorAnalysis,
    Factor,
    FactorAnalysis,
    FeatureDefinition,
    FeatureType,
    ImpactDirection,
    InputVector,
    ModelOutput,
    RiskModel,
)
from risk_service.domain.exceptions import AnalysisError, FeatureTypeMismatchError

from .executor import StrategyRegistry, compile_model
from .features import NEUTRAL_VALUES, coerce_value
from .settings import ScoringSettings, scoring_settings
from .strategies import CompiledModel

logger = structlog.get_logger(__name__)

POPULATION_BASELINE_KEY = "population_baseline"


# =============================================================================
# Baseline
# =============================================================================

def _reference_value(feature: FeatureDefinition, raw: Any) -> Any:
    """Coerce a baseline value to the feature's type, clamping numerics."""
    try:
        value = coerce_value(feature, raw)
    except FeatureTypeMismatchError as e:
        raise AnalysisError(f"Invalid baseline value: {e.message}")

    if feature.data_type == FeatureType.NUMERIC and feature.range is not None:
        low, high = feature.range
        value = min(float(high), max(float(low), value))
    return value


def _fallback_value(feature: FeatureDefinition, population: Mapping[str, Any]) -> Any:
    if feature.name in population:
        return _reference_value(feature, population[feature.name])
    if feature.default_value is not None:
        return _reference_value(feature, feature.default_value)
    if feature.required:
        raise AnalysisError(
            f"No baseline value available for required feature: {feature.name}"
        )
    return NEUTRAL_VALUES[feature.data_type]


def derive_baseline(model: RiskModel) -> Dict[str, Any]:
    """
    Build a reference input from the model definition.

    Sources, in order: the model's `population_baseline` metadata (means
    for numeric features, modal categories for categorical ones), then each
    feature's declared default, then the type-neutral value for optional
    features.

    Raises:
        AnalysisError: If a required feature has no baseline source
    """
    population = model.metadata.get(POPULATION_BASELINE_KEY) or {}
    return {
        feature.name: _fallback_value(feature, population)
        for feature in model.features
    }


def resolve_baseline(
    model: RiskModel,
    baseline: Optional[Union[InputVector, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Combine a caller-supplied baseline with the model-derived one.

    A supplied baseline must cover every required feature; optional gaps
    are filled from the model.

    Raises:
        AnalysisError: If a required feature is missing from the baseline
    """
    if baseline is None:
        return derive_baseline(model)

    supplied = baseline.to_dict() if isinstance(baseline, InputVector) else dict(baseline)
    population = model.metadata.get(POPULATION_BASELINE_KEY) or {}

    resolved: Dict[str, Any] = {}
    for feature in model.features:
        if feature.name in supplied and supplied[feature.name] is not None:
            resolved[feature.name] = _reference_value(feature, supplied[feature.name])
        elif feature.required:
            raise AnalysisError(f"Baseline is missing required feature: {feature.name}")
        else:
            resolved[feature.name] = _fallback_value(feature, population)
    return resolved


# =============================================================================
# Per-feature analysis
# =============================================================================

def normalize_impact(delta: float, score_span: float) -> float:
    """Map a score delta onto the -1..1 impact scale (negative = riskier)."""
    return min(1.0, max(-1.0, -delta / score_span))


def sample_points(low: float, high: float, count: int) -> List[float]:
    """`count` evenly spaced points from low to high inclusive, ascending."""
    step = (high - low) / (count - 1)
    points = [low + i * step for i in range(count - 1)]
    points.append(float(high))
    return points


@dataclass
class _FeatureResult:
    factor: Factor
    counterfactual_score: float
    delta: float
    continuous: Optional[ContinuousFactorAnalysis] = None
    categorical: Optional[CategoricalFactorAnalysis] = None


class _FeatureAnalyzer:
    """Runs the counterfactual evaluations for one assessment."""

    def __init__(
        self,
        model: RiskModel,
        compiled: CompiledModel,
        vector: InputVector,
        actual_score: float,
        settings: ScoringSettings,
    ):
        self.model = model
        self.compiled = compiled
        self.vector = vector
        self.actual_score = actual_score
        self.settings = settings
        self.span = model.score_span

    def _score_with(self, name: str, value: Any) -> float:
        return self.compiled.evaluate(self.vector.replace(name, value)).score

    def __call__(self, item: Tuple[FeatureDefinition, Any]) -> _FeatureResult:
        feature, baseline_value = item
        value = self.vector[feature.name]

        counterfactual = self._score_with(feature.name, baseline_value)
        delta = self.actual_score - counterfactual
        impact = normalize_impact(delta, self.span)

        factor = Factor(
            name=feature.name,
            value=value,
            impact=impact,
            direction=ImpactDirection.from_impact(impact, self.settings.neutral_epsilon),
            category=feature.category,
            description=feature.description or feature.label,
        )
        result = _FeatureResult(factor=factor, counterfactual_score=counterfactual, delta=delta)

        if (
            feature.data_type == FeatureType.NUMERIC
            and feature.range is not None
            and value is not None
        ):
            low, high = feature.range
            result.continuous = ContinuousFactorAnalysis(
                name=feature.name,
                value=float(value),
                impact=impact,
                sensitivity=[
                    (x, self._score_with(feature.name, x))
                    for x in sample_points(float(low), float(high), self.settings.sensitivity_samples)
                ],
                actionable=feature.actionable,
            )

        if feature.data_type == FeatureType.CATEGORICAL and feature.valid_values:
            value_impacts = {
                category: normalize_impact(
                    self._score_with(feature.name, category) - counterfactual,
                    self.span,
                )
                for category in feature.valid_values
            }
            # Off-catalog values are reported too
            value_impacts[str(value)] = impact
            result.categorical = CategoricalFactorAnalysis(
                name=feature.name,
                value=str(value),
                impact=impact,
                value_impacts=value_impacts,
            )

        return result


def analyze(
    model: RiskModel,
    vector: InputVector,
    output: ModelOutput,
    baseline: Optional[Union[InputVector, Mapping[str, Any]]] = None,
    settings: ScoringSettings = scoring_settings,
    registry: Optional[StrategyRegistry] = None,
) -> FactorAnalysis:
    """
    Explain a model output in terms of its input features.

    Costs one extra evaluation per feature, plus `sensitivity_samples` per
    ranged numeric feature and one per catalog value of categorical
    features. With analysis_max_workers > 1 the per-feature work runs on a
    thread pool; results are merged in model declaration order.

    Args:
        model: The model that produced the output
        vector: The input vector used for the evaluation
        output: The evaluation result being explained
        baseline: Reference values (derived from the model if not provided)
        settings: Scoring settings (uses defaults if not provided)
        registry: Strategy registry (built-ins if not provided)

    Returns:
        FactorAnalysis with factors in declaration order

    Raises:
        AnalysisError: If the baseline or input vector lacks a feature
        InvalidModelDefinitionError, UnsupportedModelTypeError,
        InvalidModelParametersError: As for execute()
    """
    compiled = compile_model(model, registry)

    for name in model.feature_names:
        if name not in vector:
            raise AnalysisError(f"Input vector is missing feature: {name}")

    reference = resolve_baseline(model, baseline)
    analyzer = _FeatureAnalyzer(model, compiled, vector, output.score, settings)
    items = [(feature, reference[feature.name]) for feature in model.features]

    if settings.analysis_max_workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=settings.analysis_max_workers) as pool:
            results = list(pool.map(analyzer, items))
    else:
        results = [analyzer(item) for item in items]

    analysis = FactorAnalysis(
        score=output.score,
        score_range=model.score_range,
        factors=[r.factor for r in results],
        baseline=reference,
        impact_values={r.factor.name: r.factor.impact for r in results},
        counterfactual_scores={r.factor.name: r.counterfactual_score for r in results},
        score_deltas={r.factor.name: r.delta for r in results},
        categorical_factors={r.factor.name: r.categorical for r in results if r.categorical},
        continuous_factors={r.factor.name: r.continuous for r in results if r.continuous},
    )

    logger.debug(
        "factor_analysis_completed",
        model_id=model.model_id,
        features=len(results),
        negative=len(analysis.negative_factors()),
        positive=len(analysis.positive_factors()),
    )
    return analysis
