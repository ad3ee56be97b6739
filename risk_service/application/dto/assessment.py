"""Data transfer objects for risk assessment operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from risk_service.domain.entities import (
    Explanations,
    FactorAnalysis,
    RiskAssessment,
    Visualization,
)


@dataclass(frozen=True)
class AssessmentRequest:
    """Input data for requesting a risk assessment."""
    applicant_id: str
    model_id: str
    baseline: Optional[Dict[str, Any]] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.applicant_id or not self.applicant_id.strip():
            errors.append("applicant_id is required")

        if not self.model_id or not self.model_id.strip():
            errors.append("model_id is required")

        return errors


@dataclass(frozen=True)
class AssessmentExplanation:
    """An assessment together with everything needed to explain it."""

    assessment: RiskAssessment
    analysis: FactorAnalysis
    explanations: Explanations
    visualization: Visualization


@dataclass(frozen=True)
class AssessmentHistoryResponse:
    """Response containing an applicant's assessment history."""

    applicant_id: str
    assessments: List[RiskAssessment] = field(default_factory=list)
