"""Repository interfaces for models and assessments."""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from risk_service.domain.entities import (
    FactorAnalysis,
    ModelStatus,
    RiskAssessment,
    RiskModel,
)


class ModelRepository(ABC):
    """
    Abstract model store.

    The scoring engine only ever reads model definitions; writes happen
    through the model management use cases.
    """

    @abstractmethod
    async def save(self, model: RiskModel) -> RiskModel:
        """
        Persist a model definition, replacing any stored version.

        Args:
            model: The model to save

        Returns:
            The saved model
        """
        ...

    @abstractmethod
    async def get_by_id(self, model_id: str) -> Optional[RiskModel]:
        """
        Retrieve a model by ID.

        Returns:
            The model if found, None otherwise
        """
        ...

    @abstractmethod
    async def list(self, status: Optional[ModelStatus] = None) -> List[RiskModel]:
        """
        List stored models, optionally filtered by lifecycle status.

        Returns:
            Models ordered by model_id
        """
        ...


class AssessmentRepository(ABC):
    """Abstract store for assessments and their factor analyses."""

    @abstractmethod
    async def save(
        self,
        assessment: RiskAssessment,
        analysis: Optional[FactorAnalysis] = None,
    ) -> RiskAssessment:
        """
        Persist an assessment together with the analysis that explains it.

        Args:
            assessment: The assessment to save
            analysis: Factor analysis computed for the assessment

        Returns:
            The saved assessment
        """
        ...

    @abstractmethod
    async def get_by_id(self, assessment_id: UUID) -> Optional[RiskAssessment]:
        """Retrieve an assessment by ID, or None."""
        ...

    @abstractmethod
    async def get_analysis(self, assessment_id: UUID) -> Optional[FactorAnalysis]:
        """Retrieve the factor analysis stored with an assessment, or None."""
        ...

    @abstractmethod
    async def get_by_applicant_id(
        self,
        applicant_id: str,
        limit: int = 10,
        offset: int = 0,
    ) -> List[RiskAssessment]:
        """
        Retrieve assessments for an applicant.

        Returns:
            Assessments ordered by assessment_date descending
        """
        ...
