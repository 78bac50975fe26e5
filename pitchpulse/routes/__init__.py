"""HTTP routers."""

from pitchpulse.routes.api import router as api_router
from pitchpulse.routes.core import router as core_router

__all__ = ["api_router", "core_router"]
