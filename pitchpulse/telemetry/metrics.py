"""
Prometheus metrics for provider ingestion and match intelligence runs.

Design principles:
- Low cardinality (controlled labels)
- Best-effort (never block main flow)

ALLOWED LABELS (bounded sets):
- provider:    "api_football"
- endpoint:    "fixtures", "fixtures/statistics", "odds", ... (max ~15)
- domain:      the seventeen orchestration domains
- outcome:     "present", "absent", "malformed"
- status_code: "200", "429", "500", "0"
- error_code:  "timeout", "request_error", "http_5xx", "parse_error", "api_error"

FORBIDDEN AS LABELS: fixture ids, team ids, team names, URLs, error messages.
Use logs for anything match specific.
"""

import logging

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)

logger = logging.getLogger(__name__)

# =============================================================================
# PROVIDER METRICS
# =============================================================================

provider_requests_total = Counter(
    "pp_provider_requests_total",
    "Total requests to the football data provider",
    ["provider", "endpoint", "status_code"],
)

provider_errors_total = Counter(
    "pp_provider_errors_total",
    "Total errors from the football data provider",
    ["provider", "endpoint", "error_code"],
)

provider_latency_ms = Histogram(
    "pp_provider_latency_ms",
    "Provider request latency in milliseconds",
    ["provider", "endpoint"],
    buckets=[10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

# =============================================================================
# ORCHESTRATION METRICS
# =============================================================================

domain_outcomes_total = Counter(
    "pp_domain_outcomes_total",
    "Domain envelopes produced by orchestration runs",
    ["domain", "outcome"],
)

orchestration_duration_ms = Histogram(
    "pp_orchestration_duration_ms",
    "Wall time of one fan-out/fan-in orchestration run",
    buckets=[100, 250, 500, 1000, 2500, 5000, 10000, 20000, 30000],
)

orchestration_failures_total = Counter(
    "pp_orchestration_failures_total",
    "Orchestration runs where every issued domain failed",
)

superseded_runs_total = Counter(
    "pp_superseded_runs_total",
    "Completed runs discarded because a newer run had started",
)

refresh_job_runs_total = Counter(
    "pp_refresh_job_runs_total",
    "Live refresh job runs by status",
    ["status"],  # ok, skipped, error
)


def record_provider_request(endpoint: str, status_code: int, latency_ms: float, provider: str = "api_football") -> None:
    """Record a provider request count and latency."""
    try:
        provider_requests_total.labels(
            provider=provider,
            endpoint=endpoint,
            status_code=str(status_code),
        ).inc()
        provider_latency_ms.labels(provider=provider, endpoint=endpoint).observe(latency_ms)
    except Exception as e:
        logger.warning(f"Failed to record provider request metric: {e}")


def record_provider_error(endpoint: str, error_code: str, provider: str = "api_football") -> None:
    """Record a provider error."""
    try:
        provider_errors_total.labels(provider=provider, endpoint=endpoint, error_code=error_code).inc()
    except Exception as e:
        logger.warning(f"Failed to record provider error metric: {e}")


def record_domain_outcome(domain: str, outcome: str) -> None:
    try:
        domain_outcomes_total.labels(domain=domain, outcome=outcome).inc()
    except Exception as e:
        logger.warning(f"Failed to record domain outcome metric: {e}")


def record_orchestration(duration_ms: float, failed: bool = False) -> None:
    try:
        orchestration_duration_ms.observe(duration_ms)
        if failed:
            orchestration_failures_total.inc()
    except Exception as e:
        logger.warning(f"Failed to record orchestration metric: {e}")


def record_superseded_run() -> None:
    try:
        superseded_runs_total.inc()
    except Exception as e:
        logger.warning(f"Failed to record superseded run metric: {e}")


def record_refresh_job(status: str) -> None:
    try:
        refresh_job_runs_total.labels(status=status).inc()
    except Exception as e:
        logger.warning(f"Failed to record refresh job metric: {e}")


def get_metrics_text() -> tuple[str, str]:
    """
    Generate Prometheus metrics text output.

    Returns:
        Tuple of (content, content_type)
    """
    return generate_latest(REGISTRY).decode("utf-8"), CONTENT_TYPE_LATEST
