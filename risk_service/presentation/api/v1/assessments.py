"""Risk assessment API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from risk_service.application.dto import AssessmentRequest
from risk_service.application.services import AssessmentService
from risk_service.core.dependencies import get_assessment_service
from risk_service.core.metrics import track_assessment_latency
from risk_service.presentation.schemas import (
    AssessmentHistoryResponseSchema,
    AssessmentRequestSchema,
    AssessmentResponseSchema,
    AssessmentSummarySchema,
    ErrorResponseSchema,
    ExplanationResponseSchema,
)

assessment_router = APIRouter(
    prefix="/assessments",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        404: {"model": ErrorResponseSchema, "description": "Not found"},
    },
)


@assessment_router.post(
    "",
    response_model=AssessmentResponseSchema,
    status_code=201,
    summary="Assess Applicant",
    description="""Score an applicant with a registered model and persist the assessment""",
    responses={
        409: {"model": ErrorResponseSchema, "description": "Model not enabled for scoring"},
        422: {"model": ErrorResponseSchema, "description": "Applicant data cannot be scored"},
        503: {"model": ErrorResponseSchema, "description": "Applicant API unavailable"},
    },
)
async def create_assessment(
    request: AssessmentRequestSchema,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> AssessmentResponseSchema:
    """
    Assess an applicant.

    Returns the risk score on the 0-1000 scale, its tier, the model's
    confidence and the most influential factors.
    """
    dto = AssessmentRequest(
        applicant_id=request.applicant_id,
        model_id=request.model_id,
        baseline=request.baseline,
    )

    with track_assessment_latency():
        assessment = await assessment_service.assess(dto)

    return AssessmentResponseSchema.from_entity(assessment)


@assessment_router.get(
    "/history",
    response_model=AssessmentHistoryResponseSchema,
    summary="Get Assessment History",
    description="""
    Retrieve the assessment history for an applicant.

    Returns a list of past assessments ordered by date (newest first).
    """,
)
async def get_assessment_history(
    applicant_id: Annotated[
        str,
        Query(
            min_length=1,
            max_length=255,
            description="Applicant ID to get history for",
        ),
    ],
    limit: Annotated[
        int,
        Query(ge=1, le=100, description="Maximum number of assessments to return"),
    ] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)] = None,
) -> AssessmentHistoryResponseSchema:
    response = await assessment_service.get_history(applicant_id, limit, offset)

    return AssessmentHistoryResponseSchema(
        applicant_id=response.applicant_id,
        assessments=[
            AssessmentSummarySchema(
                assessment_id=str(a.id),
                model_id=a.model_id,
                risk_score=round(a.risk_score, 2),
                risk_tier=a.risk_tier,
                assessment_date=a.assessment_date,
                is_expired=a.is_expired(),
            )
            for a in response.assessments
        ],
    )


@assessment_router.get(
    "/{assessment_id}",
    response_model=AssessmentResponseSchema,
    summary="Get Assessment",
)
async def get_assessment(
    assessment_id: UUID,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> AssessmentResponseSchema:
    assessment = await assessment_service.get_assessment(assessment_id)
    return AssessmentResponseSchema.from_entity(assessment)


@assessment_router.get(
    "/{assessment_id}/explanation",
    response_model=ExplanationResponseSchema,
    summary="Explain Assessment",
    description="""
    Natural-language explanation of an assessment, per-factor importances,
    suggested actions for lowering the score, and chart-ready data.
    """,
)
async def explain_assessment(
    assessment_id: UUID,
    assessment_service: Annotated[AssessmentService, Depends(get_assessment_service)],
) -> ExplanationResponseSchema:
    dto = await assessment_service.explain_assessment(assessment_id)
    return ExplanationResponseSchema.from_dto(dto)
