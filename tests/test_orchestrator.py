"""Tests for the detail fetch orchestrator."""

import asyncio

import pytest

from pitchpulse.errors import AggregateFetchError, ProviderError
from pitchpulse.orchestrator import (
    Domain,
    LIVE_ONLY_DOMAINS,
    MatchIntelligenceOrchestrator,
    build_domain_queries,
)
from pitchpulse.provider.envelope import EnvelopeKind

from tests.conftest import AWAY_ID, HOME_ID, FakeSource, make_fixture, provider_body

LIVE_ENDPOINTS = {"fixtures/statistics", "fixtures/events", "fixtures/players"}


def _lineups_body():
    side = {"formation": "4-3-3", "coach": {"name": "Coach"}, "startXI": [], "substitutes": []}
    return provider_body([side, side])


def _handler(overrides=None):
    """Empty answers everywhere unless an endpoint is overridden."""
    overrides = overrides or {}

    def handle(endpoint, params):
        if endpoint in overrides:
            value = overrides[endpoint]
            return value(params) if callable(value) else value
        return provider_body([])

    return handle


class TestBuildDomainQueries:
    def test_seventeen_queries_with_params(self, match):
        """Seventeen queries are built with the expected params."""
        queries = {q.domain: q for q in build_domain_queries(match, head_to_head_last=10, recent_form_last=10)}

        assert len(queries) == 17
        assert queries[Domain.HEAD_TO_HEAD].params == {"h2h": f"{HOME_ID}-{AWAY_ID}", "last": 10}
        assert queries[Domain.HOME_STATS].params == {"team": HOME_ID, "season": 2024, "league": 39}
        assert queries[Domain.AWAY_FORM].endpoint == "fixtures"
        assert queries[Domain.AWAY_FORM].params == {"team": AWAY_ID, "last": 10, "season": 2024}
        assert queries[Domain.STANDINGS].params == {"season": 2024, "league": 39}
        assert {d for d, q in queries.items() if q.live_only} == LIVE_ONLY_DOMAINS


class TestFetch:
    """Fan-out, live gating and failure isolation."""

    @pytest.mark.asyncio
    async def test_upcoming_match_skips_live_domains(self, match, settings):
        """A match not in play never requests the live-only domains."""
        source = FakeSource(_handler())
        orchestrator = MatchIntelligenceOrchestrator(source, settings)

        details = await orchestrator.fetch_details(match)

        assert len(source.calls) == 14
        assert not LIVE_ENDPOINTS & set(source.endpoints())
        assert details.domain_status["live_stats"] == "absent"
        assert details.live_stats is None
        assert details.events == []
        assert details.players is None

    @pytest.mark.asyncio
    async def test_live_match_requests_everything(self, live_match, settings):
        """A match in play requests all seventeen domains."""
        source = FakeSource(_handler())
        orchestrator = MatchIntelligenceOrchestrator(source, settings)

        await orchestrator.fetch_details(live_match)

        assert len(source.calls) == 17
        assert LIVE_ENDPOINTS <= set(source.endpoints())

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self, match, settings):
        """A failed domain is malformed while the others still load."""
        source = FakeSource(_handler({
            "fixtures/lineups": _lineups_body(),
            "odds": ProviderError("odds", "http_500", "Server error", status_code=500),
            "predictions": RuntimeError("connection reset"),
            "injuries": "not json",
        }))
        orchestrator = MatchIntelligenceOrchestrator(source, settings)

        details = await orchestrator.fetch_details(match)

        assert details.lineups.home.formation == "4-3-3"
        assert details.odds is None
        assert details.predictions is None
        assert details.home_injuries == []
        assert details.domain_status["odds"] == "malformed"
        assert details.domain_status["predictions"] == "malformed"
        assert details.domain_status["home_injuries"] == "malformed"
        assert details.domain_status["lineups"] == "present"
        assert details.domain_status["standings"] == "absent"

    @pytest.mark.asyncio
    async def test_timeout_becomes_malformed(self, match, settings):
        """A slow domain times out into a malformed envelope."""
        async def slow_fetch(endpoint, params):
            if endpoint == "standings":
                await asyncio.sleep(5)
            return provider_body([])

        source = FakeSource()
        source.fetch = slow_fetch
        settings.DOMAIN_TIMEOUT_SECONDS = 0.05
        orchestrator = MatchIntelligenceOrchestrator(source, settings)

        envelopes = await orchestrator.fetch_envelopes(match)

        assert envelopes[Domain.STANDINGS].kind == EnvelopeKind.MALFORMED
        assert envelopes[Domain.STANDINGS].reason == "timeout"
        assert envelopes[Domain.ODDS].kind == EnvelopeKind.ABSENT

    @pytest.mark.asyncio
    async def test_every_query_failing_raises(self, match, settings):
        """When every query fails the run raises."""
        source = FakeSource(lambda endpoint, params: ProviderError(endpoint, "timeout", "Request timeout"))
        orchestrator = MatchIntelligenceOrchestrator(source, settings)

        with pytest.raises(AggregateFetchError) as exc:
            await orchestrator.fetch_details(match)

        assert exc.value.fixture_id == match.fixture_id
        assert len(exc.value.failed_domains) == 14

    @pytest.mark.asyncio
    async def test_single_success_is_enough(self, match, settings):
        """One successful domain is enough for a result."""
        def handle(endpoint, params):
            if endpoint == "fixtures" and "id" in params:
                return provider_body([make_fixture()])
            return ProviderError(endpoint, "timeout", "Request timeout")

        orchestrator = MatchIntelligenceOrchestrator(FakeSource(handle), settings)
        details = await orchestrator.fetch_details(match)

        assert details.fixture["fixture"]["id"] == match.fixture_id
        assert details.domain_status["fixture"] == "present"

    @pytest.mark.asyncio
    async def test_form_uses_each_team_perspective(self, match, settings):
        """Each team's form is read from its own side."""
        # Both teams get the same 2-0 home win of the current home side
        def fixtures(params):
            if "team" in params:
                return provider_body([make_fixture(goals=(2, 0), status="FT")])
            return provider_body([])

        orchestrator = MatchIntelligenceOrchestrator(FakeSource(_handler({"fixtures": fixtures})), settings)
        details = await orchestrator.fetch_details(match)

        assert details.home_form.form == "W"
        assert details.away_form.form == "L"
