"""Core routes: health and metrics.

- /health: public, rate limited
- /metrics: Bearer token when METRICS_BEARER_TOKEN is set
"""

from fastapi import APIRouter, Header, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from pitchpulse import state
from pitchpulse.config import get_settings
from pitchpulse.security import check_bearer_token, limiter
from pitchpulse.telemetry import get_metrics_text
from pitchpulse.telemetry.sentry import is_sentry_enabled

router = APIRouter(tags=["core"])


class HealthResponse(BaseModel):
    status: str
    state_ready: bool
    live_refresh_running: bool
    sentry_enabled: bool


@router.get("/health", response_model=HealthResponse)
@limiter.limit("120/minute")
async def health_check(request: Request):
    """Health check endpoint."""
    ready = state.is_initialized()
    return HealthResponse(
        status="ok",
        state_ready=ready,
        live_refresh_running=ready and state.get_refresher().running,
        sentry_enabled=is_sentry_enabled(),
    )


@router.get("/metrics")
async def prometheus_metrics(
    authorization: str = Header(None, alias="Authorization"),
):
    """
    Prometheus metrics endpoint.

    Exposes provider requests/errors/latency, domain outcomes, run duration,
    superseded runs and live refresh job runs.
    """
    refusal = check_bearer_token(authorization, get_settings().METRICS_BEARER_TOKEN)
    if refusal:
        return PlainTextResponse(
            content=f"# Unauthorized: {refusal}\n",
            status_code=401,
            media_type="text/plain",
        )

    content, content_type = get_metrics_text()
    return PlainTextResponse(content=content, media_type=content_type)
