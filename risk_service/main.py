"""
ASGI application for the risk service.

Wires the model registry (/v1/models) and assessment (/v1/assessments)
routers, request-id and access-log middleware, domain error mapping and
the Prometheus /metrics endpoint. `run()` serves it with uvicorn.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from risk_service import __version__
from risk_service.core.config import settings
from risk_service.core.logging import setup_logging
from risk_service.core.metrics import get_metrics, get_metrics_content_type
from risk_service.presentation.api import api_router
from risk_service.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Sets up logging on startup and logs shutdown.
    """
    setup_logging()

    logger = structlog.get_logger(__name__)
    logger.info("application_started", version=__version__, app_name=settings.app_name)

    yield

    logger.info("application_stopped")


app = FastAPI(
    title="Risk Service",
    description="Credit Risk Scoring & Explainability Service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
