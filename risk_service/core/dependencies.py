"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from risk_service.infrastructure.repositories import (
    InMemoryAssessmentRepository,
    InMemoryModelRepository,
)
from risk_service.infrastructure.clients import HttpApplicantDataProvider
from risk_service.application.services import AssessmentService, ModelService
from risk_service.service.scoring import StrategyRegistry, default_registry


# Repository dependencies (process-wide stores)
@lru_cache
def get_model_repository() -> InMemoryModelRepository:
    """Get the shared ModelRepository instance."""
    return InMemoryModelRepository()


@lru_cache
def get_assessment_repository() -> InMemoryAssessmentRepository:
    """Get the shared AssessmentRepository instance."""
    return InMemoryAssessmentRepository()


@lru_cache
def get_strategy_registry() -> StrategyRegistry:
    """Get the shared strategy registry with the built-in model types."""
    return default_registry()


# External client dependencies
def get_applicant_provider() -> HttpApplicantDataProvider:
    """Get an ApplicantDataProvider instance."""
    return HttpApplicantDataProvider()


# Service dependencies
async def get_model_service(
    model_repo: Annotated[InMemoryModelRepository, Depends(get_model_repository)],
    registry: Annotated[StrategyRegistry, Depends(get_strategy_registry)],
) -> ModelService:
    """Get a ModelService instance."""
    return ModelService(model_repository=model_repo, registry=registry)


async def get_assessment_service(
    model_repo: Annotated[InMemoryModelRepository, Depends(get_model_repository)],
    assessment_repo: Annotated[InMemoryAssessmentRepository, Depends(get_assessment_repository)],
    applicant_provider: Annotated[HttpApplicantDataProvider, Depends(get_applicant_provider)],
    registry: Annotated[StrategyRegistry, Depends(get_strategy_registry)],
) -> AssessmentService:
    """Get an AssessmentService instance with all dependencies."""
    return AssessmentService(
        model_repository=model_repo,
        assessment_repository=assessment_repo,
        applicant_provider=applicant_provider,
        registry=registry,
    )
