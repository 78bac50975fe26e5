"""Fixture catalog filter: whitelisted competitions, view-dependent status filter."""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from pitchpulse.models import Match, TeamRef, ViewMode
from pitchpulse.normalizers._access import as_str, dig, safe_int
from pitchpulse.provider.competitions import LIVE_STATUSES, UPCOMING_STATUSES, resolve_league_ids
from pitchpulse.provider.envelope import DomainEnvelope
from pitchpulse.utils.display import format_clock, format_display_date

logger = logging.getLogger(__name__)

DEFAULT_SEASON = 2024


def target_date(view: ViewMode, today: date) -> date:
    """Day whose fixtures back a view (tomorrow = today + 1)."""
    if view == ViewMode.TOMORROW:
        return today + timedelta(days=1)
    return today


def status_allowed(view: ViewMode, status: str) -> bool:
    if view == ViewMode.LIVE:
        return status in LIVE_STATUSES
    return status in UPCOMING_STATUSES or status in LIVE_STATUSES


def _status(item: dict) -> str:
    return as_str(dig(item, "fixture", "status", "short")) or ""


def _team(item: dict, side: str) -> TeamRef:
    team = dig(item, "teams", side, default={})
    return TeamRef(
        id=safe_int(dig(team, "id")),
        name=dig(team, "name") or "Unknown",
        logo=dig(team, "logo"),
    )


def project_match(item: dict, default_season: int = DEFAULT_SEASON) -> Optional[Match]:
    """Project one raw fixture into a Match, None when it has no usable ids."""
    fixture_id = safe_int(dig(item, "fixture", "id"))
    league_id = safe_int(dig(item, "league", "id"))
    if fixture_id is None or league_id is None:
        return None

    status = _status(item)
    return Match(
        fixture_id=fixture_id,
        league_id=league_id,
        league_name=dig(item, "league", "name") or "",
        home=_team(item, "home"),
        away=_team(item, "away"),
        home_score=safe_int(dig(item, "goals", "home")) or 0,
        away_score=safe_int(dig(item, "goals", "away")) or 0,
        status=status,
        is_live=status in LIVE_STATUSES,
        clock=format_clock(dig(item, "fixture", "status", "elapsed"), status),
        date=format_display_date(dig(item, "fixture", "date")),
        season=safe_int(dig(item, "league", "season")) or default_season,
        league_flag=dig(item, "league", "flag"),
        venue=dig(item, "fixture", "venue", "name"),
        city=dig(item, "fixture", "venue", "city"),
    )


def filter_fixtures(
    envelope: DomainEnvelope,
    view: ViewMode,
    league_ids: Optional[Iterable[int]] = None,
    default_season: int = DEFAULT_SEASON,
) -> list[Match]:
    """
    Select the fixtures a view shows, preserving provider order.

    A fixture is kept iff its league is whitelisted and its status fits the
    view: in-play only for `live`, otherwise not-started or in-play. Absent
    or malformed payloads yield an empty list.
    """
    allowed = resolve_league_ids(list(league_ids) if league_ids else None)

    matches = []
    for item in envelope.response_list():
        if not isinstance(item, dict):
            continue
        if safe_int(dig(item, "league", "id")) not in allowed:
            continue
        if not status_allowed(view, _status(item)):
            continue
        match = project_match(item, default_season)
        if match is not None:
            matches.append(match)

    logger.debug(f"[CATALOG] view={view.value} kept={len(matches)}")
    return matches
