"""Risk model Pydantic schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from risk_service.domain.entities import (
    FeatureDefinition,
    FeatureType,
    ModelStatus,
    OutputDefinition,
    RiskModel,
)


class FeatureDefinitionSchema(BaseModel):
    """A feature consumed by a model."""

    name: str = Field(..., min_length=1, max_length=128, examples=["credit_score"])
    data_type: FeatureType = Field(..., examples=["numeric"])
    required: bool = False
    default_value: Any = None
    range: Optional[Tuple[float, float]] = Field(None, examples=[[300, 850]])
    valid_values: Optional[List[str]] = None
    description: str = ""
    category: str = Field("general", examples=["credit"])
    actionable: bool = True

    def to_entity(self) -> FeatureDefinition:
        return FeatureDefinition(
            name=self.name,
            data_type=self.data_type,
            required=self.required,
            default_value=self.default_value,
            range=self.range,
            valid_values=tuple(self.valid_values) if self.valid_values is not None else None,
            description=self.description,
            category=self.category,
            actionable=self.actionable,
        )


class OutputDefinitionSchema(BaseModel):
    """A value produced by a model."""

    name: str = Field(..., min_length=1, max_length=128, examples=["risk_score"])
    data_type: FeatureType = FeatureType.NUMERIC
    range: Optional[Tuple[float, float]] = None
    valid_values: Optional[List[str]] = None
    description: str = ""

    def to_entity(self) -> OutputDefinition:
        return OutputDefinition(
            name=self.name,
            data_type=self.data_type,
            range=self.range,
            valid_values=tuple(self.valid_values) if self.valid_values is not None else None,
            description=self.description,
        )


class ModelCreateSchema(BaseModel):
    """Schema for POST /v1/models request body."""

    model_config = ConfigDict(
        protected_namespaces=(),
        json_schema_extra={
            "examples": [
                {
                    "model_id": "retail-scorecard",
                    "name": "Retail Scorecard",
                    "version": "1.0.0",
                    "model_type": "linear_scorecard",
                    "score_range": [0, 1000],
                    "status": "active",
                    "features": [
                        {
                            "name": "credit_score",
                            "data_type": "numeric",
                            "required": True,
                            "range": [300, 850],
                            "category": "credit",
                        }
                    ],
                    "outputs": [{"name": "risk_score"}],
                    "parameters": {
                        "intercept": 1.0,
                        "weights": {"credit_score": -0.001},
                        "offset": 0,
                        "factor": 1000,
                    },
                }
            ]
        },
    )

    model_id: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    version: str = Field(..., min_length=1, max_length=64)
    model_type: str = Field(..., min_length=1, max_length=64, examples=["logistic_scorecard"])
    score_range: Tuple[float, float]
    features: List[FeatureDefinitionSchema]
    outputs: List[OutputDefinitionSchema]
    parameters: Dict[str, Any] = Field(default_factory=dict)
    status: ModelStatus = ModelStatus.DEVELOPMENT
    target_segment: str = "general"
    metadata: Dict[str, Any] = Field(default_factory=dict)
    validation_metrics: Dict[str, float] = Field(default_factory=dict)
    owner: str = ""

    @field_validator("model_id")
    @classmethod
    def validate_model_id(cls, v: str) -> str:
        """Ensure model_id is not just whitespace."""
        if not v.strip():
            raise ValueError("model_id cannot be empty or whitespace")
        return v.strip()

    def to_entity(self) -> RiskModel:
        return RiskModel(
            model_id=self.model_id,
            name=self.name,
            version=self.version,
            model_type=self.model_type,
            score_range=self.score_range,
            features=[f.to_entity() for f in self.features],
            outputs=[o.to_entity() for o in self.outputs],
            parameters=self.parameters,
            status=self.status,
            target_segment=self.target_segment,
            metadata=self.metadata,
            validation_metrics=self.validation_metrics,
            owner=self.owner,
        )


class ModelStatusUpdateSchema(BaseModel):
    """Schema for PATCH /v1/models/{model_id}/status."""

    status: ModelStatus = Field(..., examples=["active"])


class ModelResponseSchema(BaseModel):
    """A registered model."""

    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    name: str
    version: str
    model_type: str
    status: ModelStatus
    target_segment: str
    score_range: Tuple[float, float]
    features: List[FeatureDefinitionSchema]
    outputs: List[OutputDefinitionSchema]
    parameters: Dict[str, Any]
    metadata: Dict[str, Any]
    validation_metrics: Dict[str, float]
    owner: str
    created_date: datetime
    modified_date: datetime

    @classmethod
    def from_entity(cls, model: RiskModel) -> "ModelResponseSchema":
        return cls(
            model_id=model.model_id,
            name=model.name,
            version=model.version,
            model_type=model.model_type,
            status=model.status,
            target_segment=model.target_segment,
            score_range=model.score_range,
            features=[
                FeatureDefinitionSchema(
                    name=f.name,
                    data_type=f.data_type,
                    required=f.required,
                    default_value=f.default_value,
                    range=f.range,
                    valid_values=list(f.valid_values) if f.valid_values is not None else None,
                    description=f.description,
                    category=f.category,
                    actionable=f.actionable,
                )
                for f in model.features
            ],
            outputs=[
                OutputDefinitionSchema(
                    name=o.name,
                    data_type=o.data_type,
                    range=o.range,
                    valid_values=list(o.valid_values) if o.valid_values is not None else None,
                    description=o.description,
                )
                for o in model.outputs
            ],
            parameters=model.parameters,
            metadata=model.metadata,
            validation_metrics=model.validation_metrics,
            owner=model.owner,
            created_date=model.created_date,
            modified_date=model.modified_date,
        )


class ModelListResponseSchema(BaseModel):
    """Response for GET /v1/models."""

    models: List[ModelResponseSchema]
