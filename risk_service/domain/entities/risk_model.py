"""Risk model definition entities."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from risk_service.domain.exceptions import InvalidModelDefinitionError

RISK_SCORE_OUTPUT = "risk_score"


class ModelStatus(str, Enum):
    """Lifecycle status of a risk model."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    ACTIVE = "active"
    CHALLENGER = "challenger"  # Runs alongside the active model for comparison
    DEPRECATED = "deprecated"
    ARCHIVED = "archived"

    @property
    def is_scoring_enabled(self) -> bool:
        """Whether assessments may be produced with a model in this status."""
        return self in (ModelStatus.TESTING, ModelStatus.ACTIVE, ModelStatus.CHALLENGER)


class FeatureType(str, Enum):
    """Data type of a model feature or output."""
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    TEXT = "text"


@dataclass(frozen=True)
class FeatureDefinition:
    """
    A single input attribute consumed by a model.

    Attributes:
        name: Feature name, unique within the model
        data_type: Declared type of the feature
        required: Whether extraction fails when the value is absent
        default_value: Substituted when an optional feature is absent
        range: (min, max) for numeric features; values outside are clamped
        valid_values: Catalog of allowed values for categorical features
        description: Human-readable description
        category: Grouping used for category importance and action difficulty
        actionable: Whether improvement suggestions may propose changing it
    """
    name: str
    data_type: FeatureType
    required: bool = False
    default_value: Any = None
    range: Optional[Tuple[float, float]] = None
    valid_values: Optional[Tuple[str, ...]] = None
    description: str = ""
    category: str = "general"
    actionable: bool = True

    @property
    def label(self) -> str:
        """Readable name used in explanations."""
        return self.name.replace("_", " ")


@dataclass(frozen=True)
class OutputDefinition:
    """A single value produced by a model."""
    name: str
    data_type: FeatureType = FeatureType.NUMERIC
    range: Optional[Tuple[float, float]] = None
    valid_values: Optional[Tuple[str, ...]] = None
    description: str = ""


@dataclass(frozen=True)
class RiskModel:
    """
    Static description of a risk model and its fitted parameters.

    Owned by the model store. The scoring engine treats it as read-only
    and re-checks the structural invariants before using it.
    """
    model_id: str
    name: str
    version: str
    model_type: str
    score_range: Tuple[float, float]
    features: List[FeatureDefinition]
    outputs: List[OutputDefinition]
    parameters: Dict[str, Any] = field(default_factory=dict)
    status: ModelStatus = ModelStatus.DEVELOPMENT
    target_segment: str = "general"
    metadata: Dict[str, Any] = field(default_factory=dict)
    validation_metrics: Dict[str, float] = field(default_factory=dict)
    owner: str = ""
    created_date: datetime = field(default_factory=datetime.utcnow)
    modified_date: datetime = field(default_factory=datetime.utcnow)

    @property
    def score_min(self) -> float:
        return self.score_range[0]

    @property
    def score_max(self) -> float:
        return self.score_range[1]

    @property
    def score_span(self) -> float:
        """Width of the declared score range."""
        return self.score_range[1] - self.score_range[0]

    @property
    def feature_names(self) -> List[str]:
        return [f.name for f in self.features]

    def get_feature(self, name: str) -> Optional[FeatureDefinition]:
        for feature in self.features:
            if feature.name == name:
                return feature
        return None

    def validate_features(self) -> None:
        """
        Check that the model declares at least one feature and no duplicates,
        and that every declared range has min <= max.

        Raises:
            InvalidModelDefinitionError: If the feature list is invalid
        """
        if not self.features:
            raise InvalidModelDefinitionError(
                "Model must have at least one feature", self.model_id
            )

        seen = set()
        for feature in self.features:
            if feature.name in seen:
                raise InvalidModelDefinitionError(
                    f"Duplicate feature name: {feature.name}", self.model_id
                )
            seen.add(feature.name)
            if feature.range is not None and feature.range[0] > feature.range[1]:
                raise InvalidModelDefinitionError(
                    f"Feature '{feature.name}' range minimum exceeds its maximum: "
                    f"{tuple(feature.range)}",
                    self.model_id,
                )

    def validate_outputs(self) -> None:
        """
        Check outputs are non-empty, unique, and include risk_score.

        Raises:
            InvalidModelDefinitionError: If the output list is invalid
        """
        if not self.outputs:
            raise InvalidModelDefinitionError(
                "Model must have at least one output", self.model_id
            )

        seen = set()
        for output in self.outputs:
            if output.name in seen:
                raise InvalidModelDefinitionError(
                    f"Duplicate output name: {output.name}", self.model_id
                )
            seen.add(output.name)

        if RISK_SCORE_OUTPUT not in seen:
            raise InvalidModelDefinitionError(
                f"Model must have a '{RISK_SCORE_OUTPUT}' output", self.model_id
            )

    def validate_score_range(self) -> None:
        """
        Check that the score range minimum is below its maximum.

        Raises:
            InvalidModelDefinitionError: If min >= max
        """
        low, high = self.score_range
        if low >= high:
            raise InvalidModelDefinitionError(
                f"Score minimum must be less than maximum: ({low}, {high})",
                self.model_id,
            )

    def validate(self) -> None:
        """Run all structural checks."""
        self.validate_features()
        self.validate_outputs()
        self.validate_score_range()

    def with_status(self, status: ModelStatus) -> "RiskModel":
        """Return a copy in a new lifecycle status."""
        return replace(self, status=status, modified_date=datetime.utcnow())

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "model_id": self.model_id,
            "name": self.name,
            "version": self.version,
            "model_type": self.model_type,
            "target_segment": self.target_segment,
            "status": self.status.value,
            "score_range": list(self.score_range),
            "features": [
                {
                    "name": f.name,
                    "data_type": f.data_type.value,
                    "required": f.required,
                    "default_value": f.default_value,
                    "range": list(f.range) if f.range else None,
                    "valid_values": list(f.valid_values) if f.valid_values else None,
                    "description": f.description,
                    "category": f.category,
                    "actionable": f.actionable,
                }
                for f in self.features
            ],
            "outputs": [
                {
                    "name": o.name,
                    "data_type": o.data_type.value,
                    "range": list(o.range) if o.range else None,
                    "valid_values": list(o.valid_values) if o.valid_values else None,
                    "description": o.description,
                }
                for o in self.outputs
            ],
            "parameters": self.parameters,
            "metadata": self.metadata,
            "validation_metrics": self.validation_metrics,
            "owner": self.owner,
            "created_date": self.created_date.isoformat() + "Z",
            "modified_date": self.modified_date.isoformat() + "Z",
        }
