"""Tests for the intelligence service and the newest-run-wins feed."""

import asyncio
from datetime import date

import pytest

from pitchpulse.errors import AggregateFetchError, CatalogUnavailable, MatchNotFound, ProviderError
from pitchpulse.models import ViewMode
from pitchpulse.service import IntelligenceFeed, IntelligenceService

from tests.conftest import FakeSource, make_fixture, make_match, provider_body

DAY = date(2024, 5, 1)


def _catalog_source(*fixtures):
    def handle(endpoint, params):
        if endpoint == "fixtures" and "date" in params:
            return provider_body(list(fixtures))
        return provider_body([])

    return FakeSource(handle)


class TestListMatches:
    """Catalog loading and caching."""

    @pytest.mark.asyncio
    async def test_filters_and_requests_the_view_date(self, settings):
        """The view's date is requested and the result filtered."""
        source = _catalog_source(
            make_fixture(fixture_id=1, status="NS"),
            make_fixture(fixture_id=2, status="FT"),
        )
        service = IntelligenceService(source, settings)

        page = await service.list_matches(ViewMode.TOMORROW, today=DAY)

        assert source.calls[0] == ("fixtures", {"date": "2024-05-02"})
        assert [m.fixture_id for m in page.matches] == [1]
        assert page.to_dict()["count"] == 1
        assert page.to_dict()["date"] == "2024-05-02"

    @pytest.mark.asyncio
    async def test_cached_per_view(self, settings):
        """Each view is cached separately until invalidated."""
        source = _catalog_source(make_fixture(status="1H", elapsed=5))
        service = IntelligenceService(source, settings)

        await service.list_matches(ViewMode.LIVE, today=DAY)
        await service.list_matches(ViewMode.TODAY, today=DAY)
        await service.list_matches(ViewMode.LIVE, today=DAY)
        assert len(source.calls) == 2

        await service.list_matches(ViewMode.LIVE, today=DAY, use_cache=False)
        assert len(source.calls) == 3

        service.invalidate_catalog()
        await service.list_matches(ViewMode.TODAY, today=DAY)
        assert len(source.calls) == 4

    @pytest.mark.asyncio
    async def test_provider_failure_is_catalog_unavailable(self, settings):
        """A provider failure surfaces as CatalogUnavailable."""
        source = FakeSource(lambda endpoint, params: ProviderError(endpoint, "http_5xx", "HTTP 502", 502))
        service = IntelligenceService(source, settings)

        with pytest.raises(CatalogUnavailable) as exc:
            await service.list_matches(ViewMode.TODAY, today=DAY)
        assert exc.value.message == "Could not load matches. Please try again."

    @pytest.mark.asyncio
    async def test_empty_day_is_not_an_error(self, settings):
        """A day with no fixtures is an empty page."""
        service = IntelligenceService(_catalog_source(), settings)
        page = await service.list_matches(ViewMode.LIVE, today=DAY)
        assert page.matches == []


class TestFindMatch:
    @pytest.mark.asyncio
    async def test_from_catalog(self, settings):
        """A fixture in the view is found without a direct lookup."""
        source = _catalog_source(make_fixture(fixture_id=7))
        service = IntelligenceService(source, settings)

        match = await service.find_match(7, ViewMode.TODAY)

        assert match.fixture_id == 7
        assert source.endpoints() == ["fixtures"]

    @pytest.mark.asyncio
    async def test_direct_lookup_fallback(self, settings):
        """A fixture outside the view is looked up by id."""
        def handle(endpoint, params):
            if params.get("id") == 8:
                return provider_body([make_fixture(fixture_id=8, league_id=2)])
            return provider_body([])

        service = IntelligenceService(FakeSource(handle), settings)
        match = await service.find_match(8, ViewMode.TODAY)
        assert match.league_id == 2

    @pytest.mark.asyncio
    async def test_unknown_fixture(self, settings):
        """A fixture the provider does not know raises MatchNotFound."""
        service = IntelligenceService(_catalog_source(), settings)
        with pytest.raises(MatchNotFound):
            await service.find_match(404)

    @pytest.mark.asyncio
    async def test_lookup_error_is_not_found(self, settings):
        """A failed lookup is reported as not found."""
        source = FakeSource(lambda endpoint, params: ProviderError(endpoint, "timeout", "Request timeout"))
        service = IntelligenceService(source, settings)
        with pytest.raises(MatchNotFound):
            await service.find_match(9, ViewMode.LIVE)


class TestBuild:
    @pytest.mark.asyncio
    async def test_forward_pipeline(self, match, settings):
        """Build fetches, scores and tags the result with its generation."""
        service = IntelligenceService(FakeSource(), settings)

        result = await service.build(match, generation=3)

        assert result.generation == 3
        assert result.analysis.prediction == "Contested match"
        payload = result.to_dict()
        assert payload["match"]["fixture_id"] == match.fixture_id
        assert payload["analysis"]["betting_tips"][0]["tip"] == "X (Draw)"
        assert payload["signals"]["home_standing"] is None


class ControlledService:
    """Stands in for IntelligenceService; each build waits for its own release."""

    def __init__(self):
        self.releases: dict[int, asyncio.Event] = {}
        self.failures: dict[int, Exception] = {}

    async def build(self, match, generation=0):
        event = self.releases.setdefault(generation, asyncio.Event())
        await event.wait()
        if generation in self.failures:
            raise self.failures[generation]
        return f"result-{generation}"

    def release(self, generation):
        self.releases.setdefault(generation, asyncio.Event()).set()


class TestIntelligenceFeed:
    """Newest run wins; superseded results are discarded."""

    @pytest.mark.asyncio
    async def test_slow_older_run_is_discarded(self, match):
        """A slower older run finishing last does not replace the newer result."""
        service = ControlledService()
        feed = IntelligenceFeed(service)
        feed.select(match)

        first = asyncio.create_task(feed.run())
        second = asyncio.create_task(feed.run())
        await asyncio.sleep(0)

        service.release(2)
        assert await second == "result-2"
        service.release(1)
        assert await first is None
        assert feed.current == "result-2"

    @pytest.mark.asyncio
    async def test_superseded_failure_is_swallowed(self, match):
        """An error from a superseded run is dropped."""
        service = ControlledService()
        service.failures[1] = AggregateFetchError(match.fixture_id, ["fixture"])
        feed = IntelligenceFeed(service)
        feed.select(match)

        first = asyncio.create_task(feed.run())
        second = asyncio.create_task(feed.run())
        await asyncio.sleep(0)
        service.release(1)
        service.release(2)

        assert await first is None
        assert await second == "result-2"

    @pytest.mark.asyncio
    async def test_newest_failure_propagates(self, match):
        """An error from the newest run is raised."""
        service = ControlledService()
        service.failures[1] = AggregateFetchError(match.fixture_id, ["fixture"])
        service.release(1)
        feed = IntelligenceFeed(service)

        with pytest.raises(AggregateFetchError):
            await feed.run(match)
        assert feed.current is None

    @pytest.mark.asyncio
    async def test_clear_discards_in_flight_run(self, match):
        """Clearing drops the in-flight run and the selection."""
        service = ControlledService()
        feed = IntelligenceFeed(service)
        feed.select(match, live_view=True)

        task = asyncio.create_task(feed.run())
        await asyncio.sleep(0)
        feed.clear()
        service.release(1)

        assert await task is None
        assert feed.current is None
        assert feed.selected is None
        assert feed.live_view_active is False

    @pytest.mark.asyncio
    async def test_selecting_another_fixture_drops_current(self, match):
        """Selecting a different fixture drops the current result."""
        service = ControlledService()
        service.release(1)
        feed = IntelligenceFeed(service)
        feed.select(match)
        await feed.run()

        feed.select(match)
        assert feed.current == "result-1"
        feed.select(make_match(fixture_id=2002))
        assert feed.current is None

    @pytest.mark.asyncio
    async def test_nothing_selected(self):
        """Running with nothing selected does nothing."""
        feed = IntelligenceFeed(ControlledService())
        assert await feed.run() is None
        assert feed.generation == 0
