"""Liveness endpoint reporting what the engine can currently score."""

from typing import Annotated, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from risk_service import __version__
from risk_service.application.services import ModelService
from risk_service.core.dependencies import get_model_service, get_strategy_registry
from risk_service.service.scoring import StrategyRegistry

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    model_types: List[str]
    scorable_models: int


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Service status, supported model types and the number of models "
    "whose lifecycle status allows scoring.",
)
async def health_check(
    model_service: Annotated[ModelService, Depends(get_model_service)],
    registry: Annotated[StrategyRegistry, Depends(get_strategy_registry)],
) -> HealthResponse:
    models = await model_service.list_models()
    return HealthResponse(
        version=__version__,
        model_types=registry.model_types,
        scorable_models=sum(1 for m in models if m.status.is_scoring_enabled),
    )
