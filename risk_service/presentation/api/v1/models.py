"""Risk model management endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from risk_service.application.services import ModelService
from risk_service.core.dependencies import get_model_service
from risk_service.domain.entities import ModelStatus
from risk_service.presentation.schemas import (
    ErrorResponseSchema,
    ModelCreateSchema,
    ModelListResponseSchema,
    ModelResponseSchema,
    ModelStatusUpdateSchema,
)

model_router = APIRouter(
    prefix="/models",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid model definition"},
        404: {"model": ErrorResponseSchema, "description": "Model not found"},
    },
)


@model_router.post(
    "",
    response_model=ModelResponseSchema,
    status_code=201,
    summary="Register Model",
    description="""
    Register a risk model definition.

    The definition is validated and compiled against its model_type's
    strategy before it is stored.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Model already exists"},
    },
)
async def register_model(
    request: ModelCreateSchema,
    model_service: Annotated[ModelService, Depends(get_model_service)],
) -> ModelResponseSchema:
    model = await model_service.register_model(request.to_entity())
    return ModelResponseSchema.from_entity(model)


@model_router.get(
    "",
    response_model=ModelListResponseSchema,
    summary="List Models",
)
async def list_models(
    model_service: Annotated[ModelService, Depends(get_model_service)],
    status: Annotated[
        Optional[ModelStatus],
        Query(description="Only return models in this lifecycle status"),
    ] = None,
) -> ModelListResponseSchema:
    models = await model_service.list_models(status)
    return ModelListResponseSchema(
        models=[ModelResponseSchema.from_entity(m) for m in models]
    )


@model_router.get(
    "/{model_id}",
    response_model=ModelResponseSchema,
    summary="Get Model",
)
async def get_model(
    model_id: str,
    model_service: Annotated[ModelService, Depends(get_model_service)],
) -> ModelResponseSchema:
    model = await model_service.get_model(model_id)
    return ModelResponseSchema.from_entity(model)


@model_router.patch(
    "/{model_id}/status",
    response_model=ModelResponseSchema,
    summary="Update Model Status",
    description="Move a model through its lifecycle (e.g. testing -> active -> deprecated).",
)
async def update_model_status(
    model_id: str,
    request: ModelStatusUpdateSchema,
    model_service: Annotated[ModelService, Depends(get_model_service)],
) -> ModelResponseSchema:
    model = await model_service.update_status(model_id, request.status)
    return ModelResponseSchema.from_entity(model)
