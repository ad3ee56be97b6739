"""Explanation and visualization Pydantic schemas."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from risk_service.application.dto import AssessmentExplanation
from risk_service.domain.entities import ChartData

from .assessment import AssessmentResponseSchema


class FactorExplanationSchema(BaseModel):
    factor_name: str
    explanation: str
    importance: float = Field(..., ge=0.0, le=1.0)


class SuggestedActionSchema(BaseModel):
    description: str = Field(..., examples=["Reduce credit utilization from 0.85 to about 0.10"])
    estimated_impact: float = Field(..., description="Expected score reduction in model points")
    difficulty: int = Field(..., ge=1, le=5)
    related_factors: List[str]


class DataPointSchema(BaseModel):
    x: Any
    y: float


class DataSeriesSchema(BaseModel):
    name: str
    data: List[DataPointSchema]


class ChartDataSchema(BaseModel):
    chart_type: str = Field(..., examples=["bar"])
    title: str
    x_label: str
    y_label: str
    series: List[DataSeriesSchema]

    @classmethod
    def from_entity(cls, chart: ChartData) -> "ChartDataSchema":
        return cls(
            chart_type=chart.chart_type,
            title=chart.title,
            x_label=chart.x_label,
            y_label=chart.y_label,
            series=[
                DataSeriesSchema(
                    name=s.name,
                    data=[DataPointSchema(x=p.x, y=p.y) for p in s.data],
                )
                for s in chart.series
            ],
        )


class VisualizationSchema(BaseModel):
    factor_impact_chart: ChartDataSchema
    score_distribution_chart: ChartDataSchema
    sensitivity_charts: Dict[str, ChartDataSchema]
    categorical_charts: Dict[str, ChartDataSchema]


class ExplanationResponseSchema(BaseModel):
    """Response for GET /v1/assessments/{assessment_id}/explanation."""

    assessment: AssessmentResponseSchema
    overall_explanation: str
    factor_explanations: List[FactorExplanationSchema]
    suggested_actions: List[SuggestedActionSchema]
    category_importance: Dict[str, float]
    visualization: VisualizationSchema

    @classmethod
    def from_dto(cls, dto: AssessmentExplanation) -> "ExplanationResponseSchema":
        explanations = dto.explanations
        visualization = dto.visualization
        return cls(
            assessment=AssessmentResponseSchema.from_entity(dto.assessment),
            overall_explanation=explanations.overall_explanation,
            factor_explanations=[
                FactorExplanationSchema(
                    factor_name=e.factor_name,
                    explanation=e.explanation,
                    importance=e.importance,
                )
                for e in explanations.factor_explanations
            ],
            suggested_actions=[
                SuggestedActionSchema(
                    description=a.description,
                    estimated_impact=a.estimated_impact,
                    difficulty=a.difficulty,
                    related_factors=a.related_factors,
                )
                for a in explanations.suggested_actions
            ],
            category_importance=dto.analysis.category_importance(),
            visualization=VisualizationSchema(
                factor_impact_chart=ChartDataSchema.from_entity(visualization.factor_impact_chart),
                score_distribution_chart=ChartDataSchema.from_entity(
                    visualization.score_distribution_chart
                ),
                sensitivity_charts={
                    name: ChartDataSchema.from_entity(chart)
                    for name, chart in visualization.sensitivity_charts.items()
                },
                categorical_charts={
                    name: ChartDataSchema.from_entity(chart)
                    for name, chart in visualization.categorical_charts.items()
                },
            ),
        )
