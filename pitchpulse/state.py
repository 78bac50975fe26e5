"""Shared singletons for the PitchPulse application.

Singleton-by-import pattern: main.py and routers import from this module
to share the same provider client, service, feed and live refresher.
"""

import logging
from typing import Optional

from pitchpulse.config import Settings, get_settings
from pitchpulse.live import LiveRefresher
from pitchpulse.provider.api_football import APIFootballClient
from pitchpulse.provider.base import FootballDataSource
from pitchpulse.service import IntelligenceFeed, IntelligenceService

logger = logging.getLogger(__name__)

_source: Optional[FootballDataSource] = None
_service: Optional[IntelligenceService] = None
_feed: Optional[IntelligenceFeed] = None
_refresher: Optional[LiveRefresher] = None


def is_initialized() -> bool:
    return _service is not None


def init_state(source: Optional[FootballDataSource] = None, settings: Optional[Settings] = None) -> None:
    """Build the singletons; `source` defaults to the API-Football client."""
    global _source, _service, _feed, _refresher

    settings = settings or get_settings()
    _source = source or APIFootballClient(settings)
    _service = IntelligenceService(_source, settings)
    _feed = IntelligenceFeed(_service)
    _refresher = LiveRefresher(_feed, settings)
    logger.info(f"State initialized with source {type(_source).__name__}")


async def shutdown_state() -> None:
    global _source, _service, _feed, _refresher

    if _refresher is not None and _refresher.running:
        _refresher.stop()
    if _source is not None:
        await _source.close()
    _source = _service = _feed = _refresher = None


def get_service() -> IntelligenceService:
    if _service is None:
        raise RuntimeError("Application state not initialized")
    return _service


def get_feed() -> IntelligenceFeed:
    if _feed is None:
        raise RuntimeError("Application state not initialized")
    return _feed


def get_refresher() -> LiveRefresher:
    if _refresher is None:
        raise RuntimeError("Application state not initialized")
    return _refresher
