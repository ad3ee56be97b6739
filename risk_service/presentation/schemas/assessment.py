"""Assessment-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from risk_service.domain.entities import Factor, ImpactDirection, RiskAssessment


class AssessmentRequestSchema(BaseModel):
    """Schema for POST /v1/assessments request body."""

    model_config = ConfigDict(
        protected_namespaces=(),
        json_schema_extra={
            "examples": [
                {
                    "applicant_id": "applicant_123",
                    "model_id": "retail-scorecard",
                }
            ]
        },
    )
    applicant_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Identifier of the applicant to assess",
        examples=["applicant_123"],
    )
    model_id: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Model to score the applicant with",
        examples=["retail-scorecard"],
    )
    baseline: Optional[Dict[str, Any]] = Field(
        None,
        description="Reference feature values for factor analysis; derived from the model if omitted",
    )

    @field_validator("applicant_id", "model_id")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        """Ensure identifiers are not just whitespace."""
        if not v.strip():
            raise ValueError("identifier cannot be empty or whitespace")
        return v.strip()


class FactorSchema(BaseModel):
    """One feature's contribution to an assessment."""

    name: str = Field(..., examples=["credit_utilization"])
    value: Any = Field(None, examples=[0.85])
    impact: float = Field(
        ...,
        ge=-1.0,
        le=1.0,
        description="Normalized impact; negative values increase risk",
        examples=[-0.12],
    )
    direction: ImpactDirection
    category: str = Field(..., examples=["credit"])
    description: str = ""

    @classmethod
    def from_entity(cls, factor: Factor) -> "FactorSchema":
        return cls(**factor.to_dict())


class AssessmentResponseSchema(BaseModel):
    """A persisted risk assessment."""

    model_config = ConfigDict(protected_namespaces=())

    assessment_id: str
    applicant_id: str
    model_id: str
    risk_score: float = Field(..., ge=0.0, le=1000.0, description="Risk score on the 0-1000 scale")
    risk_tier: str = Field(..., examples=["Moderate"])
    confidence: float = Field(..., ge=0.0, le=1.0)
    key_factors: List[FactorSchema]
    assessment_date: datetime
    expires_date: datetime
    is_expired: bool
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, assessment: RiskAssessment) -> "AssessmentResponseSchema":
        return cls(
            assessment_id=str(assessment.id),
            applicant_id=assessment.applicant_id,
            model_id=assessment.model_id,
            risk_score=round(assessment.risk_score, 2),
            risk_tier=assessment.risk_tier,
            confidence=round(assessment.confidence, 4),
            key_factors=[FactorSchema.from_entity(f) for f in assessment.key_factors],
            assessment_date=assessment.assessment_date,
            expires_date=assessment.expires_date,
            is_expired=assessment.is_expired(),
            metadata=assessment.metadata,
        )


class AssessmentSummarySchema(BaseModel):
    """Brief summary of an assessment for history listings."""

    model_config = ConfigDict(protected_namespaces=())

    assessment_id: str
    model_id: str
    risk_score: float
    risk_tier: str
    assessment_date: datetime
    is_expired: bool


class AssessmentHistoryResponseSchema(BaseModel):
    """Response for GET /v1/assessments/history."""

    applicant_id: str
    assessments: List[AssessmentSummarySchema]
