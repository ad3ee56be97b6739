"""Prometheus metrics for the Risk Service.

Metrics are organized into two categories:

Business Metrics (for Risk/Credit teams):
- risk_assessment_total: Assessments by risk tier and model
- risk_model_registration_total: Registered models by type

Technical Metrics (for Engineering/SRE):
- risk_assessment_latency_seconds: End-to-end assessment latency
- risk_model_execution_latency_seconds: Model evaluation latency by model type
- risk_factor_analysis_latency_seconds: Factor analysis latency
- risk_applicant_fetch_latency_seconds: Applicant API latency
- risk_applicant_fetch_failures_total: Applicant API failures
- risk_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics
# =============================================================================

assessment_total = Counter(
    "risk_assessment_total",
    "Total number of risk assessments produced",
    ["tier", "model_id"],
)

model_registration_total = Counter(
    "risk_model_registration_total",
    "Total number of risk models registered",
    ["model_type"],
)


# =============================================================================
# Technical Metrics
# =============================================================================

assessment_latency = Histogram(
    "risk_assessment_latency_seconds",
    "End-to-end assessment latency in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

model_execution_latency = Histogram(
    "risk_model_execution_latency_seconds",
    "Model evaluation latency in seconds",
    ["model_type"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

factor_analysis_latency = Histogram(
    "risk_factor_analysis_latency_seconds",
    "Factor analysis latency in seconds",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

applicant_fetch_latency = Histogram(
    "risk_applicant_fetch_latency_seconds",
    "Applicant API fetch latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

applicant_fetch_failures = Counter(
    "risk_applicant_fetch_failures_total",
    "Total number of applicant API failures",
    ["error_type"],  # timeout, error, not_found
)

applicant_fetch_total = Counter(
    "risk_applicant_fetch_total",
    "Total number of applicant API requests",
    ["status"],  # success, failure
)

http_requests_total = Counter(
    "risk_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "risk_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_assessment(tier: str, model_id: str) -> None:
    """Record a completed assessment."""
    assessment_total.labels(tier=tier, model_id=model_id).inc()


def record_model_registration(model_type: str) -> None:
    """Record a model registration."""
    model_registration_total.labels(model_type=model_type).inc()


@contextmanager
def track_assessment_latency() -> Generator[None, None, None]:
    """Context manager to track assessment latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        assessment_latency.observe(time.perf_counter() - start)


@contextmanager
def track_model_execution_latency(model_type: str) -> Generator[None, None, None]:
    """Context manager to track model execution latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        model_execution_latency.labels(model_type=model_type).observe(
            time.perf_counter() - start
        )


@contextmanager
def track_factor_analysis_latency() -> Generator[None, None, None]:
    """Context manager to track factor analysis latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        factor_analysis_latency.observe(time.perf_counter() - start)


@contextmanager
def track_applicant_fetch_latency() -> Generator[None, None, None]:
    """Context manager to track applicant API fetch latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        applicant_fetch_latency.observe(time.perf_counter() - start)


def record_applicant_fetch_success() -> None:
    """Record a successful applicant API fetch."""
    applicant_fetch_total.labels(status="success").inc()


def record_applicant_fetch_failure(error_type: str) -> None:
    """Record an applicant API fetch failure."""
    applicant_fetch_total.labels(status="failure").inc()
    applicant_fetch_failures.labels(error_type=error_type).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
