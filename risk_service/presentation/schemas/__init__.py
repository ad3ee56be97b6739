"""Pydantic schemas for API request/response validation."""

from .model import (
    FeatureDefinitionSchema,
    OutputDefinitionSchema,
    ModelCreateSchema,
    ModelStatusUpdateSchema,
    ModelResponseSchema,
    ModelListResponseSchema,
)
from .assessment import (
    AssessmentRequestSchema,
    AssessmentResponseSchema,
    AssessmentSummarySchema,
    AssessmentHistoryResponseSchema,
    FactorSchema,
)
from .explanation import ExplanationResponseSchema, ChartDataSchema
from .error import ErrorResponseSchema

__all__ = [
    "FeatureDefinitionSchema",
    "OutputDefinitionSchema",
    "ModelCreateSchema",
    "ModelStatusUpdateSchema",
    "ModelResponseSchema",
    "ModelListResponseSchema",
    "AssessmentRequestSchema",
    "AssessmentResponseSchema",
    "AssessmentSummarySchema",
    "AssessmentHistoryResponseSchema",
    "FactorSchema",
    "ExplanationResponseSchema",
    "ChartDataSchema",
    "ErrorResponseSchema",
]
