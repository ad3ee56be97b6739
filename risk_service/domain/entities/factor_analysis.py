"""Factor analysis and explainability entities."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from .risk_assessment import Factor, ImpactDirection, sort_by_impact


@dataclass(frozen=True)
class CategoricalFactorAnalysis:
    """
    Impact of every catalog value of a categorical feature.

    value_impacts always contains the applicant's own value, even when it
    is outside the feature's catalog.
    """
    name: str
    value: str
    impact: float
    value_impacts: Dict[str, float]


@dataclass(frozen=True)
class ContinuousFactorAnalysis:
    """
    Sensitivity of the score to a numeric feature.

    sensitivity holds (sampled_value, resulting_score) pairs in ascending
    order of sampled_value.
    """
    name: str
    value: float
    impact: float
    sensitivity: List[Tuple[float, float]]
    actionable: bool = True


@dataclass(frozen=True)
class FactorAnalysis:
    """
    Per-assessment decomposition of a score into feature contributions.

    Attributes:
        score: The actual score being explained
        score_range: The model's declared (min, max) score range
        factors: One Factor per model feature, in declaration order
        baseline: Reference value used for each feature
        impact_values: Feature name -> normalized impact
        counterfactual_scores: Score with that one feature at its baseline
        score_deltas: score - counterfactual score, per feature
        categorical_factors: Per-value impacts for categorical features
        continuous_factors: Sensitivity curves for ranged numeric features
    """
    score: float
    score_range: Tuple[float, float]
    factors: List[Factor]
    baseline: Dict[str, Any]
    impact_values: Dict[str, float]
    counterfactual_scores: Dict[str, float]
    score_deltas: Dict[str, float]
    categorical_factors: Dict[str, CategoricalFactorAnalysis] = field(default_factory=dict)
    continuous_factors: Dict[str, ContinuousFactorAnalysis] = field(default_factory=dict)
    analysis_id: str = field(default_factory=lambda: str(uuid4()))
    assessment_id: Optional[str] = None

    def top_factors(self, n: int) -> List[Factor]:
        """
        The n factors with greatest absolute impact.

        Ties keep model declaration order.
        """
        if n <= 0:
            return []
        return sort_by_impact(self.factors)[:n]

    def category_importance(self) -> Dict[str, float]:
        """
        Share of total absolute impact per factor category.

        Sums to 1.0 when any factor moved the score; all zeros otherwise.
        """
        importance: Dict[str, float] = {}
        for factor in self.factors:
            importance[factor.category] = importance.get(factor.category, 0.0) + abs(factor.impact)

        total = sum(importance.values())
        if total > 0:
            return {category: value / total for category, value in importance.items()}
        return {category: 0.0 for category in importance}

    def get_factor(self, name: str) -> Optional[Factor]:
        for factor in self.factors:
            if factor.name == name:
                return factor
        return None

    def positive_factors(self) -> List[Factor]:
        return [f for f in self.factors if f.direction == ImpactDirection.POSITIVE]

    def negative_factors(self) -> List[Factor]:
        return [f for f in self.factors if f.direction == ImpactDirection.NEGATIVE]

    def with_assessment_id(self, assessment_id: str) -> "FactorAnalysis":
        return replace(self, assessment_id=assessment_id)


@dataclass(frozen=True)
class FactorExplanation:
    """Natural-language explanation of a single factor."""
    factor_name: str
    explanation: str
    importance: float


@dataclass(frozen=True)
class SuggestedAction:
    """
    An applicant action expected to lower the score.

    Attributes:
        description: What to do
        estimated_impact: Expected score reduction
        difficulty: 1 (easy) to 5 (hard)
        related_factors: Names of the factors the action acts on
    """
    description: str
    estimated_impact: float
    difficulty: int
    related_factors: List[str]


@dataclass(frozen=True)
class Explanations:
    """Human-readable view over a FactorAnalysis."""
    overall_explanation: str
    factor_explanations: List[FactorExplanation]
    suggested_actions: List[SuggestedAction]


@dataclass(frozen=True)
class DataPoint:
    x: Any
    y: float


@dataclass(frozen=True)
class DataSeries:
    name: str
    data: List[DataPoint]


@dataclass(frozen=True)
class ChartData:
    """Chart-ready data; rendering is left to the consumer."""
    chart_type: str
    title: str
    x_label: str
    y_label: str
    series: List[DataSeries]


@dataclass(frozen=True)
class Visualization:
    """Chart data assembled from a FactorAnalysis."""
    factor_impact_chart: ChartData
    score_distribution_chart: ChartData
    sensitivity_charts: Dict[str, ChartData]
    categorical_charts: Dict[str, ChartData] = field(default_factory=dict)
