"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from risk_service.domain.exceptions import (
    AnalysisError,
    ApplicantDataProviderException,
    ApplicantDataProviderTimeoutException,
    ApplicantNotFoundException,
    AssessmentNotFoundException,
    DomainException,
    DuplicateModelException,
    ExtractionError,
    ModelNotFoundException,
    ModelNotScorableException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses:
    not found -> 404, conflicts -> 409, applicant-data scoring failures
    -> 422, upstream provider failures -> 503, other domain errors -> 400.
    """

    @app.exception_handler(ModelNotFoundException)
    @app.exception_handler(AssessmentNotFoundException)
    @app.exception_handler(ApplicantNotFoundException)
    async def not_found_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle not found errors."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(DuplicateModelException)
    @app.exception_handler(ModelNotScorableException)
    async def conflict_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle conflicts with the current model state."""
        return _error_response(409, exc.code, exc.message)

    @app.exception_handler(ExtractionError)
    @app.exception_handler(AnalysisError)
    async def unprocessable_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle applicant data the model cannot score."""
        logger.warning(
            "scoring_input_rejected",
            code=exc.code,
            message=exc.message,
        )
        return _error_response(422, exc.code, exc.message)

    @app.exception_handler(ApplicantDataProviderTimeoutException)
    async def provider_timeout_handler(
        request: Request,
        exc: ApplicantDataProviderTimeoutException,
    ) -> JSONResponse:
        """Handle applicant API timeout errors."""
        logger.error("applicant_api_timeout")
        return _error_response(
            503, exc.code, "Service temporarily unavailable. Please try again."
        )

    @app.exception_handler(ApplicantDataProviderException)
    async def provider_error_handler(
        request: Request,
        exc: ApplicantDataProviderException,
    ) -> JSONResponse:
        """Handle applicant API errors."""
        logger.error(
            "applicant_api_error",
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(
            503, exc.code, "Unable to process request. Please try again later."
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
