"""
Explanation Builder for the Risk Scoring Engine.

Turns a FactorAnalysis into:
- An overall natural-language explanation
- One explanation per factor, with normalized importance
- Ranked suggestions for lowering the score
- Chart-ready series (visualize), a pure reshaping of analysis fields
"""

from typing import Any, List

from risk_service.domain.entities import (
    ChartData,
    DataPoint,
    DataSeries,
    Explanations,
    Factor,
    FactorAnalysis,
    FactorExplanation,
    ImpactDirection,
    SuggestedAction,
    Visualization,
)

from .settings import ScoringSettings, scoring_settings
from .tiers import classify_tier


def _label(name: str) -> str:
    return name.replace("_", " ")


def format_value(value: Any) -> str:
    """Render a feature value for explanation text."""
    if value is None:
        return "n/a"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        if float(value).is_integer():
            return f"{value:,.0f}"
        return f"{value:,.2f}"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value) or "(blank)"


def _join(items: List[str]) -> str:
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " and " + items[-1]


def _overall_explanation(analysis: FactorAnalysis, settings: ScoringSettings) -> str:
    tier = classify_tier(analysis.score, analysis.score_range)
    opening = (
        f"The risk score of {analysis.score:.1f} places this applicant "
        f"in the {tier.value} risk tier."
    )

    top = [
        f for f in analysis.top_factors(settings.top_explanation_factors)
        if f.direction != ImpactDirection.NEUTRAL
    ]
    if not top:
        return f"{opening} No single factor moved the score materially away from the baseline."

    importance = analysis.category_importance()
    dominant = max(importance, key=importance.get)
    contributors = [
        f"{_label(f.name)} ({'increases' if f.direction == ImpactDirection.NEGATIVE else 'reduces'} risk)"
        for f in top
    ]
    return (
        f"{opening} {dominant.capitalize()} factors carry the most weight "
        f"({importance[dominant]:.0%} of the total impact). "
        f"Main contributors: {_join(contributors)}."
    )


def _factor_explanation(
    analysis: FactorAnalysis,
    factor: Factor,
    total_impact: float,
) -> FactorExplanation:
    label = _label(factor.name).capitalize()
    value = format_value(factor.value)
    reference = format_value(analysis.baseline.get(factor.name))
    points = abs(analysis.score_deltas.get(factor.name, 0.0))

    if factor.direction == ImpactDirection.NEGATIVE:
        text = (
            f"{label} of {value} increases risk compared with the reference value "
            f"of {reference}, adding {points:.1f} points to the score."
        )
    elif factor.direction == ImpactDirection.POSITIVE:
        text = (
            f"{label} of {value} reduces risk compared with the reference value "
            f"of {reference}, lowering the score by {points:.1f} points."
        )
    else:
        text = f"{label} of {value} has little effect on the score."

    importance = abs(factor.impact) / total_impact if total_impact > 0 else 0.0
    return FactorExplanation(
        factor_name=factor.name,
        explanation=text,
        importance=importance,
    )


def suggest_actions(
    analysis: FactorAnalysis,
    settings: ScoringSettings = scoring_settings,
) -> List[SuggestedAction]:
    """
    Suggest changes that would lower the score.

    Only risk-increasing, actionable numeric factors with a sensitivity
    curve are considered. The target is the sampled value with the lowest
    score; suggestions whose gain is below min_action_impact of the score
    range are dropped.

    Returns:
        Actions ranked by estimated score reduction, largest first
    """
    low, high = analysis.score_range
    threshold = settings.min_action_impact * (high - low)
    actions: List[SuggestedAction] = []

    for factor in analysis.factors:
        if factor.direction != ImpactDirection.NEGATIVE:
            continue
        continuous = analysis.continuous_factors.get(factor.name)
        if continuous is None or not continuous.actionable or not continuous.sensitivity:
            continue

        best_value, best_score = min(continuous.sensitivity, key=lambda point: point[1])
        gain = analysis.score - best_score
        if gain <= 0 or gain < threshold:
            continue

        verb = "Reduce" if best_value < continuous.value else "Increase"
        actions.append(SuggestedAction(
            description=(
                f"{verb} {_label(factor.name)} from {format_value(continuous.value)} "
                f"to about {format_value(best_value)}"
            ),
            estimated_impact=gain,
            difficulty=settings.difficulty_for(factor.category),
            related_factors=[factor.name],
        ))

    return sorted(actions, key=lambda action: action.estimated_impact, reverse=True)


def explain(
    analysis: FactorAnalysis,
    settings: ScoringSettings = scoring_settings,
) -> Explanations:
    """
    Build natural-language explanations for a factor analysis.

    Args:
        analysis: The analysis to explain
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Overall explanation, per-factor explanations (importances sum to
        1.0 unless every impact is zero) and ranked suggested actions
    """
    total_impact = sum(abs(f.impact) for f in analysis.factors)
    return Explanations(
        overall_explanation=_overall_explanation(analysis, settings),
        factor_explanations=[
            _factor_explanation(analysis, factor, total_impact)
            for factor in analysis.factors
        ],
        suggested_actions=suggest_actions(analysis, settings),
    )


def visualize(analysis: FactorAnalysis) -> Visualization:
    """
    Assemble chart data from a factor analysis.

    No values are computed here; every point comes straight from the
    analysis.
    """
    factor_impact_chart = ChartData(
        chart_type="bar",
        title="Factor impact on risk",
        x_label="Factor",
        y_label="Impact (negative increases risk)",
        series=[DataSeries(
            name="impact",
            data=[DataPoint(x=f.name, y=f.impact) for f in analysis.factors],
        )],
    )

    score_distribution_chart = ChartData(
        chart_type="scatter",
        title="Score with each factor at its baseline",
        x_label="Factor",
        y_label="Score",
        series=[
            DataSeries(
                name="counterfactual",
                data=[
                    DataPoint(x=name, y=score)
                    for name, score in analysis.counterfactual_scores.items()
                ],
            ),
            DataSeries(
                name="actual",
                data=[DataPoint(x="actual", y=analysis.score)],
            ),
        ],
    )

    sensitivity_charts = {
        name: ChartData(
            chart_type="line",
            title=f"Score sensitivity to {_label(name)}",
            x_label=_label(name),
            y_label="Score",
            series=[
                DataSeries(
                    name="score",
                    data=[DataPoint(x=x, y=y) for x, y in continuous.sensitivity],
                ),
                DataSeries(
                    name="current",
                    data=[DataPoint(x=continuous.value, y=analysis.score)],
                ),
            ],
        )
        for name, continuous in analysis.continuous_factors.items()
    }

    categorical_charts = {
        name: ChartData(
            chart_type="bar",
            title=f"Impact of each {_label(name)} value",
            x_label=_label(name),
            y_label="Impact (negative increases risk)",
            series=[DataSeries(
                name="impact",
                data=[
                    DataPoint(x=category, y=impact)
                    for category, impact in categorical.value_impacts.items()
                ],
            )],
        )
        for name, categorical in analysis.categorical_factors.items()
    }

    return Visualization(
        factor_impact_chart=factor_impact_chart,
        score_distribution_chart=score_distribution_chart,
        sensitivity_charts=sensitivity_charts,
        categorical_charts=categorical_charts,
    )
