"""Match catalog, match intelligence and live view routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from pitchpulse import state
from pitchpulse.errors import AggregateFetchError, CatalogUnavailable, MatchNotFound
from pitchpulse.models import ViewMode
from pitchpulse.security import default_rate_limit, limiter
from pitchpulse.service import IntelligenceFeed, IntelligenceService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["matches"])

RETRY_HINT = {"Retry-After": "5"}


@router.get("/matches")
@limiter.limit(default_rate_limit)
async def list_matches(
    request: Request,
    view: ViewMode = Query(ViewMode.TODAY, description="live | today | tomorrow"),
    service: IntelligenceService = Depends(state.get_service),
):
    """Whitelisted fixtures for a view. An empty list is a valid answer."""
    try:
        page = await service.list_matches(view)
    except CatalogUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message, headers=RETRY_HINT)
    return page.to_dict()


@router.get("/matches/{fixture_id}/intelligence")
@limiter.limit(default_rate_limit)
async def match_intelligence(
    request: Request,
    fixture_id: int,
    view: ViewMode = Query(ViewMode.TODAY, description="Catalog view the fixture was picked from"),
    feed: IntelligenceFeed = Depends(state.get_feed),
):
    """
    Full intelligence record for one fixture: the match snapshot, every
    normalized domain and the heuristic analysis.
    """
    service = feed.service
    try:
        match = await service.find_match(fixture_id, view)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail="Match not found")

    watching = feed.selected is not None and feed.selected.fixture_id == fixture_id
    feed.select(match, live_view=feed.live_view_active and watching)
    try:
        result = await feed.run(match)
    except AggregateFetchError as e:
        raise HTTPException(status_code=503, detail=e.message, headers=RETRY_HINT)

    if result is None:
        # A newer run for this feed finished the race; serve the newest result
        current = feed.current
        if current is None or current.match.fixture_id != fixture_id:
            raise HTTPException(status_code=409, detail="Superseded by a newer request. Please try again.")
        result = current
    return result.to_dict()


@router.post("/live/watch/{fixture_id}")
@limiter.limit(default_rate_limit)
async def watch_live(
    request: Request,
    fixture_id: int,
    feed: IntelligenceFeed = Depends(state.get_feed),
):
    """Select a fixture for the live view; the refresh job keeps it current."""
    try:
        match = await feed.service.find_match(fixture_id, ViewMode.LIVE)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail="Match not found")

    feed.select(match, live_view=True)
    try:
        result = await feed.run(match)
    except AggregateFetchError as e:
        raise HTTPException(status_code=503, detail=e.message, headers=RETRY_HINT)

    logger.info(f"[LIVE] Watching fixture {fixture_id} (live={match.is_live})")
    return {
        "watching": fixture_id,
        "is_live": match.is_live,
        "generation": feed.generation,
        "intelligence": result.to_dict() if result is not None else None,
    }


@router.delete("/live/watch")
async def unwatch_live(feed: IntelligenceFeed = Depends(state.get_feed)):
    previous = feed.selected.fixture_id if feed.selected is not None else None
    feed.clear()
    return {"watching": None, "previous": previous}


@router.get("/live/current")
async def live_current(feed: IntelligenceFeed = Depends(state.get_feed)):
    current = feed.current
    return {
        "watching": feed.selected.fixture_id if feed.selected is not None else None,
        "live_view_active": feed.live_view_active,
        "generation": feed.generation,
        "intelligence": current.to_dict() if current is not None else None,
    }
