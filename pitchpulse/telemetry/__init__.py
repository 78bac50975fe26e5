"""
Telemetry: Prometheus metrics and optional Sentry error tracking.
"""

from pitchpulse.telemetry.metrics import (
    get_metrics_text,
    record_domain_outcome,
    record_orchestration,
    record_provider_error,
    record_provider_request,
    record_refresh_job,
    record_superseded_run,
)

__all__ = [
    "get_metrics_text",
    "record_domain_outcome",
    "record_orchestration",
    "record_provider_error",
    "record_provider_request",
    "record_refresh_job",
    "record_superseded_run",
]
