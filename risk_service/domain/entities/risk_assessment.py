"""Risk assessment entity and factor types."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from risk_service.domain.exceptions import InvalidAssessmentRequestException


class ImpactDirection(str, Enum):
    """Direction of a factor's effect on risk."""
    NEGATIVE = "negative"  # Increases risk
    POSITIVE = "positive"  # Decreases risk
    NEUTRAL = "neutral"

    @classmethod
    def from_impact(cls, impact: float, epsilon: float) -> "ImpactDirection":
        """Derive direction from an impact value with a dead zone around zero."""
        if impact < -epsilon:
            return cls.NEGATIVE
        if impact > epsilon:
            return cls.POSITIVE
        return cls.NEUTRAL


@dataclass(frozen=True)
class Factor:
    """
    One feature's contribution to a specific assessment's score.

    Attributes:
        name: Feature name
        value: The applicant's value for the feature
        impact: Normalized impact (-1.0 to 1.0). Negative increases risk.
        direction: Sign of the impact with a dead zone
        category: Feature category
        description: Human-readable description
    """
    name: str
    value: Any
    impact: float
    direction: ImpactDirection
    category: str
    description: str = ""

    def to_dict(self) -> dict:
        value = self.value
        if isinstance(value, datetime):
            value = value.isoformat()
        return {
            "name": self.name,
            "value": value,
            "impact": round(self.impact, 6),
            "direction": self.direction.value,
            "category": self.category,
            "description": self.description,
        }


def sort_by_impact(factors: List[Factor]) -> List[Factor]:
    """Sort by absolute impact, descending. Stable, so ties keep input order."""
    return sorted(factors, key=lambda f: abs(f.impact), reverse=True)


@dataclass
class RiskAssessment:
    """
    Persisted result of scoring one applicant with one model.

    Assembled by the orchestrating layer after the engine runs; the engine
    itself never assigns identifiers or timestamps.
    """

    applicant_id: str
    model_id: str
    risk_score: float
    risk_tier: str
    confidence: float
    key_factors: List[Factor]
    expires_date: datetime
    id: UUID = field(default_factory=uuid4)
    assessment_date: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0.0 <= self.risk_score <= 1000.0:
            raise InvalidAssessmentRequestException(
                f"risk_score must be within 0-1000, got {self.risk_score}"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise InvalidAssessmentRequestException(
                f"confidence must be within 0-1, got {self.confidence}"
            )
        if self.expires_date <= self.assessment_date:
            raise InvalidAssessmentRequestException(
                "expires_date must be after assessment_date"
            )

    @classmethod
    def create(
        cls,
        applicant_id: str,
        model_id: str,
        risk_score: float,
        risk_tier: str,
        confidence: float,
        key_factors: List[Factor],
        validity_days: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "RiskAssessment":
        """Create an assessment stamped now and expiring after validity_days."""
        now = datetime.utcnow()
        return cls(
            applicant_id=applicant_id,
            model_id=model_id,
            risk_score=risk_score,
            risk_tier=risk_tier,
            confidence=confidence,
            key_factors=key_factors,
            assessment_date=now,
            expires_date=now + timedelta(days=validity_days),
            metadata=metadata or {},
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.utcnow()) > self.expires_date

    def top_factors(self, n: int) -> List[Factor]:
        return sort_by_impact(self.key_factors)[:n]

    def positive_factors(self) -> List[Factor]:
        """Factors reducing risk."""
        return [f for f in self.key_factors if f.direction == ImpactDirection.POSITIVE]

    def negative_factors(self) -> List[Factor]:
        """Factors increasing risk."""
        return [f for f in self.key_factors if f.direction == ImpactDirection.NEGATIVE]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "assessment_id": str(self.id),
            "applicant_id": self.applicant_id,
            "model_id": self.model_id,
            "risk_score": round(self.risk_score, 2),
            "risk_tier": self.risk_tier,
            "confidence": round(self.confidence, 4),
            "key_factors": [f.to_dict() for f in self.key_factors],
            "assessment_date": self.assessment_date.isoformat() + "Z",
            "expires_date": self.expires_date.isoformat() + "Z",
            "is_expired": self.is_expired(),
            "metadata": self.metadata,
        }
