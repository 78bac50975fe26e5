"""
Detail fetch orchestrator: one fan-out/fan-in run over every data domain of a match.

Each domain query runs concurrently and is individually bounded by a
timeout. Failures are contained per domain: a query that raises, times out
or returns an unusable body becomes a MALFORMED envelope for that domain
only, and its normalizer produces the "no data" shape. Live-only domains
are never requested for a match that is not in play.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pitchpulse.config import Settings, get_settings
from pitchpulse.errors import AggregateFetchError, ProviderError
from pitchpulse.models import Match, MatchDetails
from pitchpulse.normalizers import (
    normalize_events,
    normalize_fixture,
    normalize_form,
    normalize_head_to_head,
    normalize_injuries,
    normalize_lineups,
    normalize_live_stats,
    normalize_odds,
    normalize_players,
    normalize_predictions,
    normalize_squad,
    normalize_standings,
    normalize_team_stats,
)
from pitchpulse.provider.base import FootballDataSource
from pitchpulse.provider.envelope import DomainEnvelope, EnvelopeKind

logger = logging.getLogger(__name__)


class Domain(str, Enum):
    FIXTURE = "fixture"
    LIVE_STATS = "live_stats"
    EVENTS = "events"
    LINEUPS = "lineups"
    PLAYERS = "players"
    HEAD_TO_HEAD = "head_to_head"
    PREDICTIONS = "predictions"
    ODDS = "odds"
    HOME_STATS = "home_stats"
    AWAY_STATS = "away_stats"
    HOME_INJURIES = "home_injuries"
    AWAY_INJURIES = "away_injuries"
    HOME_FORM = "home_form"
    AWAY_FORM = "away_form"
    HOME_SQUAD = "home_squad"
    AWAY_SQUAD = "away_squad"
    STANDINGS = "standings"


LIVE_ONLY_DOMAINS = frozenset({Domain.LIVE_STATS, Domain.EVENTS, Domain.PLAYERS})


@dataclass(frozen=True)
class DomainQuery:
    domain: Domain
    endpoint: str
    params: dict = field(default_factory=dict)

    @property
    def live_only(self) -> bool:
        return self.domain in LIVE_ONLY_DOMAINS


def build_domain_queries(match: Match, head_to_head_last: int = 10, recent_form_last: int = 10) -> list[DomainQuery]:
    """The seventeen domain queries for one match, in a fixed order."""
    fixture = {"fixture": match.fixture_id}
    home_id = match.home.id
    away_id = match.away.id
    season = match.season
    return [
        DomainQuery(Domain.FIXTURE, "fixtures", {"id": match.fixture_id}),
        DomainQuery(Domain.LIVE_STATS, "fixtures/statistics", dict(fixture)),
        DomainQuery(Domain.EVENTS, "fixtures/events", dict(fixture)),
        DomainQuery(Domain.LINEUPS, "fixtures/lineups", dict(fixture)),
        DomainQuery(Domain.PLAYERS, "fixtures/players", dict(fixture)),
        DomainQuery(
            Domain.HEAD_TO_HEAD,
            "fixtures/headtohead",
            {"h2h": f"{home_id}-{away_id}", "last": head_to_head_last},
        ),
        DomainQuery(Domain.PREDICTIONS, "predictions", dict(fixture)),
        DomainQuery(Domain.ODDS, "odds", dict(fixture)),
        DomainQuery(Domain.HOME_STATS, "teams/statistics", {"team": home_id, "season": season, "league": match.league_id}),
        DomainQuery(Domain.AWAY_STATS, "teams/statistics", {"team": away_id, "season": season, "league": match.league_id}),
        DomainQuery(Domain.HOME_INJURIES, "injuries", {"team": home_id, "season": season}),
        DomainQuery(Domain.AWAY_INJURIES, "injuries", {"team": away_id, "season": season}),
        DomainQuery(Domain.HOME_FORM, "fixtures", {"team": home_id, "last": recent_form_last, "season": season}),
        DomainQuery(Domain.AWAY_FORM, "fixtures", {"team": away_id, "last": recent_form_last, "season": season}),
        DomainQuery(Domain.HOME_SQUAD, "players/squads", {"team": home_id}),
        DomainQuery(Domain.AWAY_SQUAD, "players/squads", {"team": away_id}),
        DomainQuery(Domain.STANDINGS, "standings", {"season": season, "league": match.league_id}),
    ]


def assemble_details(match: Match, envelopes: dict[Domain, DomainEnvelope]) -> MatchDetails:
    """Normalize every domain envelope into one MatchDetails."""
    missing = DomainEnvelope.absent()

    def env(domain: Domain) -> DomainEnvelope:
        return envelopes.get(domain, missing)

    return MatchDetails(
        fixture=normalize_fixture(env(Domain.FIXTURE)),
        live_stats=normalize_live_stats(env(Domain.LIVE_STATS)),
        events=normalize_events(env(Domain.EVENTS)),
        lineups=normalize_lineups(env(Domain.LINEUPS)),
        players=normalize_players(env(Domain.PLAYERS)),
        h2h=normalize_head_to_head(env(Domain.HEAD_TO_HEAD), match),
        predictions=normalize_predictions(env(Domain.PREDICTIONS)),
        odds=normalize_odds(env(Domain.ODDS)),
        home_stats=normalize_team_stats(env(Domain.HOME_STATS)),
        away_stats=normalize_team_stats(env(Domain.AWAY_STATS)),
        home_injuries=normalize_injuries(env(Domain.HOME_INJURIES)),
        away_injuries=normalize_injuries(env(Domain.AWAY_INJURIES)),
        home_form=normalize_form(env(Domain.HOME_FORM), match.home.id),
        away_form=normalize_form(env(Domain.AWAY_FORM), match.away.id),
        standings=normalize_standings(env(Domain.STANDINGS), match),
        home_squad=normalize_squad(env(Domain.HOME_SQUAD)),
        away_squad=normalize_squad(env(Domain.AWAY_SQUAD)),
        domain_status={domain.value: env(domain).kind.value for domain in Domain},
    )


class MatchIntelligenceOrchestrator:
    """Fans out the domain queries of one match and fans the results back in."""

    def __init__(self, source: FootballDataSource, settings: Optional[Settings] = None):
        self.source = source
        self.settings = settings or get_settings()

    async def _fetch_one(self, match: Match, query: DomainQuery) -> DomainEnvelope:
        try:
            payload = await asyncio.wait_for(
                self.source.fetch(query.endpoint, query.params),
                timeout=self.settings.DOMAIN_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[ORCHESTRATOR] fixture={match.fixture_id} domain={query.domain.value} timed out")
            return DomainEnvelope.malformed("timeout")
        except ProviderError as e:
            logger.warning(
                f"[ORCHESTRATOR] fixture={match.fixture_id} domain={query.domain.value} "
                f"provider error {e.code}: {e.message}"
            )
            return DomainEnvelope.malformed(e.code)
        except Exception as e:
            logger.warning(
                f"[ORCHESTRATOR] fixture={match.fixture_id} domain={query.domain.value} "
                f"failed: {type(e).__name__}: {e}"
            )
            return DomainEnvelope.malformed(type(e).__name__)
        return DomainEnvelope.wrap(payload)

    async def fetch_envelopes(self, match: Match) -> dict[Domain, DomainEnvelope]:
        """
        Run every applicable domain query concurrently.

        Raises:
            AggregateFetchError: every issued query came back malformed.
        """
        queries = build_domain_queries(
            match,
            head_to_head_last=self.settings.HEAD_TO_HEAD_LAST,
            recent_form_last=self.settings.RECENT_FORM_LAST,
        )

        envelopes: dict[Domain, DomainEnvelope] = {}
        issued: list[DomainQuery] = []
        for query in queries:
            if query.live_only and not match.is_live:
                envelopes[query.domain] = DomainEnvelope.absent("not_live")
            else:
                issued.append(query)

        start = time.time()
        results = await asyncio.gather(*(self._fetch_one(match, q) for q in issued))
        duration_ms = (time.time() - start) * 1000

        for query, envelope in zip(issued, results):
            envelopes[query.domain] = envelope

        failed = [q.domain.value for q, e in zip(issued, results) if e.kind == EnvelopeKind.MALFORMED]
        all_failed = bool(issued) and len(failed) == len(issued)

        try:
            from pitchpulse.telemetry import record_domain_outcome, record_orchestration

            for domain, envelope in envelopes.items():
                record_domain_outcome(domain.value, envelope.kind.value)
            record_orchestration(duration_ms, failed=all_failed)
        except Exception as e:
            logger.debug(f"Telemetry skipped: {e}")

        logger.info(
            f"[ORCHESTRATOR] fixture={match.fixture_id} live={match.is_live} issued={len(issued)} "
            f"failed={len(failed)} duration_ms={duration_ms:.0f}"
        )

        if all_failed:
            raise AggregateFetchError(match.fixture_id, failed)
        return envelopes

    async def fetch_details(self, match: Match) -> MatchDetails:
        envelopes = await self.fetch_envelopes(match)
        return assemble_details(match, envelopes)
