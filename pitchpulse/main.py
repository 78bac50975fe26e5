"""FastAPI application for PitchPulse."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pitchpulse import __version__, state
from pitchpulse.config import get_settings
from pitchpulse.routes import api_router, core_router
from pitchpulse.security import limiter
from pitchpulse.telemetry.sentry import init_sentry

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking (before FastAPI app creation)
# Only activates if SENTRY_DSN is set in environment
init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting PitchPulse...")
    if not state.is_initialized():
        state.init_state(settings=settings)

    if settings.LIVE_REFRESH_ENABLED:
        state.get_refresher().start()
    else:
        logger.info("Live refresher disabled (LIVE_REFRESH_ENABLED=false)")

    yield

    logger.info("Shutting down PitchPulse...")
    await state.shutdown_state()


app = FastAPI(
    title="PitchPulse",
    description="Match intelligence and betting insights from API-Football",
    version=__version__,
    lifespan=lifespan,
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include routers
app.include_router(core_router)
app.include_router(api_router)
