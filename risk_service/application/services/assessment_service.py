"""Assessment service - orchestrates the risk assessment use case."""

from typing import Optional
from uuid import UUID

import structlog

from risk_service.core.config import settings
from risk_service.core.metrics import (
    record_assessment,
    track_factor_analysis_latency,
    track_model_execution_latency,
)
from risk_service.domain.entities import (
    ASSESSMENT_SCALE_MAX,
    FactorAnalysis,
    RiskAssessment,
)
from risk_service.domain.exceptions import (
    AnalysisError,
    AssessmentNotFoundException,
    InvalidAssessmentRequestException,
    ModelNotFoundException,
    ModelNotScorableException,
)
from risk_service.domain.interfaces import (
    ApplicantDataProvider,
    AssessmentRepository,
    ModelRepository,
)
from risk_service.application.dto import (
    AssessmentExplanation,
    AssessmentHistoryResponse,
    AssessmentRequest,
)
from risk_service.service.scoring import (
    ScoringSettings,
    StrategyRegistry,
    analyze,
    execute,
    explain,
    extract,
    normalize_score,
    scoring_settings,
    visualize,
)

logger = structlog.get_logger(__name__)


class AssessmentService:
    """
    Application service for risk assessment use cases.

    Fetches the model and applicant, runs the scoring engine
    (extract, execute, analyze) and persists the resulting assessment with
    its factor analysis. Explanations are rebuilt on demand from the
    stored analysis.
    """

    def __init__(
        self,
        model_repository: ModelRepository,
        assessment_repository: AssessmentRepository,
        applicant_provider: ApplicantDataProvider,
        registry: Optional[StrategyRegistry] = None,
        engine_settings: ScoringSettings = scoring_settings,
        validity_days: Optional[int] = None,
    ):
        self._model_repo = model_repository
        self._assessment_repo = assessment_repository
        self._applicant_provider = applicant_provider
        self._registry = registry
        self._settings = engine_settings
        self._validity_days = validity_days or settings.assessment_validity_days

    async def assess(self, request: AssessmentRequest) -> RiskAssessment:
        """
        Score an applicant with a model and persist the assessment.

        Args:
            request: Applicant, model and optional baseline

        Returns:
            The persisted RiskAssessment, with risk_score on the 0-1000 scale

        Raises:
            InvalidAssessmentRequestException: If request validation fails
            ModelNotFoundException: If the model doesn't exist
            ModelNotScorableException: If the model's status disallows scoring
            ApplicantNotFoundException: If the applicant doesn't exist
            ApplicantDataProviderException: If the applicant source fails
            ExtractionError, ExecutionError, AnalysisError: From the engine
        """
        errors = request.validate()
        if errors:
            raise InvalidAssessmentRequestException("; ".join(errors))

        log = logger.bind(
            applicant_id=request.applicant_id,
            model_id=request.model_id,
        )
        log.info("assessment_requested")

        model = await self._model_repo.get_by_id(request.model_id)
        if model is None:
            raise ModelNotFoundException(request.model_id)
        if not model.status.is_scoring_enabled:
            raise ModelNotScorableException(model.model_id, model.status.value)

        applicant = await self._applicant_provider.get_applicant(request.applicant_id)
        log.info("applicant_fetched")

        vector = extract(applicant, model)

        with track_model_execution_latency(model.model_type):
            output = execute(model, vector, self._registry)

        with track_factor_analysis_latency():
            analysis = analyze(
                model,
                vector,
                output,
                baseline=request.baseline,
                settings=self._settings,
                registry=self._registry,
            )

        normalized = normalize_score(output.score, model.score_range)
        assessment = RiskAssessment.create(
            applicant_id=request.applicant_id,
            model_id=model.model_id,
            risk_score=normalized * ASSESSMENT_SCALE_MAX,
            risk_tier=output.tier,
            confidence=output.confidence,
            key_factors=analysis.top_factors(self._settings.key_factor_count),
            validity_days=self._validity_days,
            metadata={
                "model_version": model.version,
                "model_type": model.model_type,
                "model_score": output.score,
                "score_range": list(model.score_range),
                "execution_time_ms": round(output.execution_time, 3),
                "warnings": list(output.warnings),
            },
        )

        await self._assessment_repo.save(
            assessment,
            analysis.with_assessment_id(str(assessment.id)),
        )
        record_assessment(assessment.risk_tier, model.model_id)

        if output.has_warnings:
            log.warning("assessment_data_quality", warnings=output.warnings)
        log.info(
            "assessment_completed",
            assessment_id=str(assessment.id),
            risk_score=round(assessment.risk_score, 2),
            risk_tier=assessment.risk_tier,
            confidence=round(assessment.confidence, 4),
        )
        return assessment

    async def get_assessment(self, assessment_id: UUID) -> RiskAssessment:
        """
        Get a specific assessment by ID.

        Raises:
            AssessmentNotFoundException: If the assessment doesn't exist
        """
        assessment = await self._assessment_repo.get_by_id(assessment_id)
        if assessment is None:
            raise AssessmentNotFoundException(str(assessment_id))
        return assessment

    async def get_analysis(self, assessment_id: UUID) -> FactorAnalysis:
        """
        Get the factor analysis stored with an assessment.

        Raises:
            AssessmentNotFoundException: If the assessment doesn't exist
            AnalysisError: If no analysis was stored for it
        """
        await self.get_assessment(assessment_id)
        analysis = await self._assessment_repo.get_analysis(assessment_id)
        if analysis is None:
            raise AnalysisError(f"No factor analysis stored for assessment {assessment_id}")
        return analysis

    async def explain_assessment(self, assessment_id: UUID) -> AssessmentExplanation:
        """Build explanations and chart data for a stored assessment."""
        assessment = await self.get_assessment(assessment_id)
        analysis = await self.get_analysis(assessment_id)

        return AssessmentExplanation(
            assessment=assessment,
            analysis=analysis,
            explanations=explain(analysis, self._settings),
            visualization=visualize(analysis),
        )

    async def get_history(
        self,
        applicant_id: str,
        limit: int = 10,
        offset: int = 0,
    ) -> AssessmentHistoryResponse:
        """
        Get assessment history for an applicant, newest first.
        """
        assessments = await self._assessment_repo.get_by_applicant_id(
            applicant_id, limit=limit, offset=offset
        )
        return AssessmentHistoryResponse(applicant_id=applicant_id, assessments=assessments)
