"""In-memory implementations of the model and assessment repositories."""

import asyncio
from typing import Dict, List, Optional
from uuid import UUID

from risk_service.domain.entities import (
    FactorAnalysis,
    ModelStatus,
    RiskAssessment,
    RiskModel,
)
from risk_service.domain.interfaces import AssessmentRepository, ModelRepository


class InMemoryModelRepository(ModelRepository):
    """
    Process-local model store.

    RiskModel is immutable, so stored instances are handed out directly.
    """

    def __init__(self):
        self._models: Dict[str, RiskModel] = {}
        self._lock = asyncio.Lock()

    async def save(self, model: RiskModel) -> RiskModel:
        async with self._lock:
            self._models[model.model_id] = model
        return model

    async def get_by_id(self, model_id: str) -> Optional[RiskModel]:
        return self._models.get(model_id)

    async def list(self, status: Optional[ModelStatus] = None) -> List[RiskModel]:
        models = sorted(self._models.values(), key=lambda m: m.model_id)
        if status is not None:
            models = [m for m in models if m.status == status]
        return models


class InMemoryAssessmentRepository(AssessmentRepository):
    """Process-local store for assessments and their factor analyses."""

    def __init__(self):
        self._assessments: Dict[UUID, RiskAssessment] = {}
        self._analyses: Dict[UUID, FactorAnalysis] = {}
        self._lock = asyncio.Lock()

    async def save(
        self,
        assessment: RiskAssessment,
        analysis: Optional[FactorAnalysis] = None,
    ) -> RiskAssessment:
        async with self._lock:
            self._assessments[assessment.id] = assessment
            if analysis is not None:
                self._analyses[assessment.id] = analysis
        return assessment

    async def get_by_id(self, assessment_id: UUID) -> Optional[RiskAssessment]:
        return self._assessments.get(assessment_id)

    async def get_analysis(self, assessment_id: UUID) -> Optional[FactorAnalysis]:
        return self._analyses.get(assessment_id)

    async def get_by_applicant_id(
        self,
        applicant_id: str,
        limit: int = 10,
        offset: int = 0,
    ) -> List[RiskAssessment]:
        """Retrieve assessments for an applicant, ordered by assessment_date descending."""
        matches = [a for a in self._assessments.values() if a.applicant_id == applicant_id]
        matches.sort(key=lambda a: a.assessment_date, reverse=True)
        return matches[offset:offset + limit]
