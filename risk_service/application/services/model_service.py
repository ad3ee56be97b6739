"""Model service - registration and lifecycle of risk models."""

from typing import List, Optional

import structlog

from risk_service.core.metrics import record_model_registration
from risk_service.domain.entities import ModelStatus, RiskModel
from risk_service.domain.exceptions import DuplicateModelException, ModelNotFoundException
from risk_service.domain.interfaces import ModelRepository
from risk_service.service.scoring import StrategyRegistry, compile_model

logger = structlog.get_logger(__name__)


class ModelService:
    """
    Application service for model management use cases.
    """

    def __init__(
        self,
        model_repository: ModelRepository,
        registry: Optional[StrategyRegistry] = None,
    ):
        self._model_repo = model_repository
        self._registry = registry

    async def register_model(self, model: RiskModel) -> RiskModel:
        """
        Register a new model definition.

        The model is compiled against its strategy before it is stored, so
        structural and parameter errors surface at registration time.

        Raises:
            DuplicateModelException: If model_id is already registered
            InvalidModelDefinitionError: If the model is structurally invalid
            UnsupportedModelTypeError: If no strategy handles model_type
            InvalidModelParametersError: If parameters are malformed
        """
        if await self._model_repo.get_by_id(model.model_id) is not None:
            raise DuplicateModelException(model.model_id)

        compile_model(model, self._registry)
        await self._model_repo.save(model)

        record_model_registration(model.model_type)
        logger.info(
            "model_registered",
            model_id=model.model_id,
            model_type=model.model_type,
            version=model.version,
            features=len(model.features),
        )
        return model

    async def get_model(self, model_id: str) -> RiskModel:
        """
        Get a model by ID.

        Raises:
            ModelNotFoundException: If the model doesn't exist
        """
        model = await self._model_repo.get_by_id(model_id)
        if model is None:
            raise ModelNotFoundException(model_id)
        return model

    async def list_models(self, status: Optional[ModelStatus] = None) -> List[RiskModel]:
        return await self._model_repo.list(status=status)

    async def update_status(self, model_id: str, status: ModelStatus) -> RiskModel:
        """
        Move a model to a new lifecycle status.

        Raises:
            ModelNotFoundException: If the model doesn't exist
        """
        model = await self.get_model(model_id)
        updated = model.with_status(status)
        await self._model_repo.save(updated)

        logger.info(
            "model_status_changed",
            model_id=model_id,
            previous_status=model.status.value,
            status=status.value,
        )
        return updated
