"""Shared builders for provider payloads, matches and aggregates."""

import dataclasses
from typing import Callable, Optional

import pytest

from pitchpulse.catalog import project_match
from pitchpulse.config import Settings
from pitchpulse.models import (
    FormRecord,
    HeadToHead,
    Match,
    MatchDetails,
    SplitCount,
    StandingsExcerpt,
    TeamSeasonStats,
)
from pitchpulse.provider.base import FootballDataSource

HOME_ID = 50
AWAY_ID = 42


def make_fixture(
    fixture_id: int = 1001,
    league_id: int = 39,
    status: str = "NS",
    elapsed: Optional[int] = None,
    home: tuple = (HOME_ID, "Manchester City"),
    away: tuple = (AWAY_ID, "Arsenal"),
    goals: tuple = (None, None),
    date: str = "2024-05-01T19:00:00+00:00",
    season: Optional[int] = 2024,
    timestamp: Optional[int] = None,
) -> dict:
    """Raw API-Football fixture object."""
    fixture = {
        "id": fixture_id,
        "date": date,
        "venue": {"name": "Etihad Stadium", "city": "Manchester"},
        "status": {"short": status, "elapsed": elapsed},
    }
    if timestamp is not None:
        fixture["timestamp"] = timestamp
    return {
        "fixture": fixture,
        "league": {"id": league_id, "name": "Premier League", "flag": "gb.svg", "season": season},
        "teams": {
            "home": {"id": home[0], "name": home[1], "logo": f"{home[0]}.png"},
            "away": {"id": away[0], "name": away[1], "logo": f"{away[0]}.png"},
        },
        "goals": {"home": goals[0], "away": goals[1]},
    }


def provider_body(response) -> dict:
    return {"get": "test", "errors": [], "results": len(response or []), "response": response}


def make_match(**kwargs) -> Match:
    return project_match(make_fixture(**kwargs))


def make_stats(
    form: str = "",
    played: int = 0,
    wins: int = 0,
    draws: int = 0,
    losses: int = 0,
    goals_for: int = 0,
    goals_against: int = 0,
    goals_for_average: Optional[float] = None,
    goals_against_average: Optional[float] = None,
    clean_sheets: tuple = (0, 0),
) -> TeamSeasonStats:
    return TeamSeasonStats(
        form=form,
        played=SplitCount(home=0, away=0, total=played),
        wins=SplitCount(home=0, away=0, total=wins),
        draws=SplitCount(home=0, away=0, total=draws),
        losses=SplitCount(home=0, away=0, total=losses),
        goals_for=SplitCount(home=0, away=0, total=goals_for),
        goals_against=SplitCount(home=0, away=0, total=goals_against),
        goals_for_average=goals_for_average,
        goals_against_average=goals_against_average,
        clean_sheets=SplitCount(home=clean_sheets[0], away=clean_sheets[1], total=sum(clean_sheets)),
        failed_to_score=None,
    )


def empty_details(**overrides) -> MatchDetails:
    """A MatchDetails where every domain reported no data."""
    details = MatchDetails(
        fixture=None,
        live_stats=None,
        events=[],
        lineups=None,
        players=None,
        h2h=HeadToHead(),
        predictions=None,
        odds=None,
        home_stats=None,
        away_stats=None,
        home_injuries=[],
        away_injuries=[],
        home_form=FormRecord(),
        away_form=FormRecord(),
        standings=StandingsExcerpt(),
    )
    return dataclasses.replace(details, **overrides)


class FakeSource(FootballDataSource):
    """In-memory data source recording every call.

    `handler(endpoint, params)` returns a body or an exception instance to raise.
    """

    def __init__(self, handler: Optional[Callable[[str, dict], object]] = None):
        self.calls: list[tuple[str, dict]] = []
        self.handler = handler or (lambda endpoint, params: provider_body([]))
        self.closed = False

    async def fetch(self, endpoint: str, params: dict) -> dict:
        self.calls.append((endpoint, dict(params)))
        result = self.handler(endpoint, params)
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True

    def endpoints(self) -> list[str]:
        return [endpoint for endpoint, _ in self.calls]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        RAPIDAPI_KEY="test-key",
        API_REQUESTS_PER_MINUTE=0,
        API_RATE_LIMIT_BACKOFF_SECONDS=0.0,
        DOMAIN_TIMEOUT_SECONDS=1.0,
        LIVE_REFRESH_ENABLED=False,
    )


@pytest.fixture
def match():
    return make_match()


@pytest.fixture
def live_match():
    return make_match(status="2H", elapsed=67, goals=(1, 0))
