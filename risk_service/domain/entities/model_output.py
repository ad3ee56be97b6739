"""Model execution output and risk tiers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

ASSESSMENT_SCALE_MAX = 1000.0


class RiskTier(str, Enum):
    """Discrete risk category derived from a continuous score."""
    VERY_LOW = "Very Low"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"

    @classmethod
    def from_normalized(cls, normalized: float) -> "RiskTier":
        """
        Map a score already normalized into [0, 1] to a tier.

        Lower bounds are inclusive: exactly 0.2 is LOW, not VERY_LOW.
        """
        if normalized < 0.2:
            return cls.VERY_LOW
        elif normalized < 0.4:
            return cls.LOW
        elif normalized < 0.6:
            return cls.MODERATE
        elif normalized < 0.8:
            return cls.HIGH
        else:
            return cls.VERY_HIGH

    @classmethod
    def from_score(cls, score: float, max_score: float = ASSESSMENT_SCALE_MAX) -> "RiskTier":
        """Tier on a fixed 0..max_score scale (the assessment scale)."""
        normalized = min(1.0, max(0.0, score / max_score))
        return cls.from_normalized(normalized)


@dataclass(frozen=True)
class InputVector:
    """
    Typed feature values for one evaluation, in model declaration order.

    Attributes:
        values: Feature name -> extracted value
        warnings: Non-fatal data quality issues found during extraction
    """
    values: Mapping[str, Any]
    warnings: Tuple[str, ...] = ()

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def names(self) -> List[str]:
        return list(self.values.keys())

    def replace(self, name: str, value: Any) -> "InputVector":
        """Return a new vector with exactly one entry swapped."""
        if name not in self.values:
            raise KeyError(name)
        updated = dict(self.values)
        updated[name] = value
        return InputVector(values=updated, warnings=self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.values)

    @classmethod
    def of(cls, values: Mapping[str, Any], warnings: Sequence[str] = ()) -> "InputVector":
        return cls(values=dict(values), warnings=tuple(warnings))


@dataclass
class ModelOutput:
    """
    Result of executing a model against an input vector.

    Immutable once returned by the executor; warnings and execution time
    are only written while the evaluation is in progress.

    Attributes:
        score: Risk score, semantically bounded by the model's score range
        tier: Risk tier label
        confidence: Confidence in the score (0.0-1.0)
        raw_outputs: Value for every output the model declares
        execution_time: Wall-clock evaluation time in milliseconds
        warnings: Non-fatal issues encountered
    """
    score: float
    tier: str
    confidence: float
    raw_outputs: Dict[str, Any] = field(default_factory=dict)
    execution_time: float = 0.0
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def set_execution_time(self, time_ms: float) -> None:
        self.execution_time = time_ms

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def get_output(self, name: str) -> Optional[Any]:
        return self.raw_outputs.get(name)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "score": self.score,
            "tier": self.tier,
            "confidence": self.confidence,
            "raw_outputs": dict(self.raw_outputs),
            "execution_time": round(self.execution_time, 3),
            "warnings": list(self.warnings),
        }
