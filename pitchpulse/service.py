"""Match intelligence pipeline and the newest-run-wins feed."""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from pitchpulse.analysis import analyze
from pitchpulse.catalog import filter_fixtures, project_match, target_date
from pitchpulse.config import Settings, get_settings
from pitchpulse.errors import CatalogUnavailable, MatchNotFound, ProviderError
from pitchpulse.fallbacks import ResolvedSignals, resolve_signals
from pitchpulse.models import AnalysisResult, Match, MatchDetails, ViewMode
from pitchpulse.orchestrator import MatchIntelligenceOrchestrator
from pitchpulse.provider.base import FootballDataSource
from pitchpulse.provider.envelope import DomainEnvelope
from pitchpulse.utils.cache import KeyedCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogPage:
    view: ViewMode
    day: date
    matches: list[Match]

    def to_dict(self) -> dict:
        return {
            "view": self.view.value,
            "date": self.day.isoformat(),
            "count": len(self.matches),
            "matches": [dataclasses.asdict(m) for m in self.matches],
        }


@dataclass(frozen=True)
class MatchIntelligence:
    """Output of one complete run: catalog snapshot, aggregate, signals, analysis."""

    generation: int
    match: Match
    details: MatchDetails
    signals: ResolvedSignals
    analysis: AnalysisResult

    def to_dict(self) -> dict:
        return {
            "generation": self.generation,
            "match": dataclasses.asdict(self.match),
            "details": dataclasses.asdict(self.details),
            "signals": {
                "home_form": dataclasses.asdict(self.signals.home_form),
                "away_form": dataclasses.asdict(self.signals.away_form),
                "home_standing": _standing_dict(self.signals.home_standing),
                "away_standing": _standing_dict(self.signals.away_standing),
            },
            "analysis": self.analysis.to_dict(),
        }


def _standing_dict(entry) -> Optional[dict]:
    if entry is None:
        return None
    data = dataclasses.asdict(entry)
    data["rank_label"] = entry.rank_label
    return data


class IntelligenceService:
    """Catalog lookups and the forward pipeline for a selected match."""

    def __init__(self, source: FootballDataSource, settings: Optional[Settings] = None):
        self.source = source
        self.settings = settings or get_settings()
        self.orchestrator = MatchIntelligenceOrchestrator(source, self.settings)
        self._catalogs = KeyedCache(ttl=self.settings.CATALOG_CACHE_TTL_SECONDS)

    async def list_matches(self, view: ViewMode, today: Optional[date] = None, use_cache: bool = True) -> CatalogPage:
        """
        Fixtures a view shows.

        Raises:
            CatalogUnavailable: the day's fixture list could not be retrieved.
        """
        day = target_date(view, today or date.today())

        if use_cache:
            hit, cached = self._catalogs.get(view, params=day)
            if hit:
                return cached

        try:
            payload = await self.source.get_fixtures_by_date(day, timezone=self.settings.API_TIMEZONE or None)
        except ProviderError as e:
            logger.error(f"[CATALOG] Fixture list for {day} unavailable: {e.code} {e.message}")
            raise CatalogUnavailable() from e

        matches = filter_fixtures(
            DomainEnvelope.wrap(payload),
            view,
            league_ids=self.settings.tracked_league_ids(),
            default_season=self.settings.DEFAULT_SEASON,
        )
        page = CatalogPage(view=view, day=day, matches=matches)
        self._catalogs.set(view, page, params=day)
        logger.info(f"[CATALOG] view={view.value} date={day} matches={len(matches)}")
        return page

    async def find_match(self, fixture_id: int, view: Optional[ViewMode] = None) -> Match:
        """
        Resolve a fixture id, first from the view's catalog, then by direct lookup.

        Raises:
            MatchNotFound: neither the catalog nor the provider knows the fixture.
        """
        if view is not None:
            try:
                page = await self.list_matches(view)
            except CatalogUnavailable:
                page = None
            if page is not None:
                for match in page.matches:
                    if match.fixture_id == fixture_id:
                        return match

        try:
            payload = await self.source.get_fixture(fixture_id)
        except ProviderError as e:
            logger.warning(f"[CATALOG] Fixture {fixture_id} lookup failed: {e.code}")
            raise MatchNotFound(fixture_id) from e

        item = DomainEnvelope.wrap(payload).response_list()
        match = project_match(item[0], self.settings.DEFAULT_SEASON) if item and isinstance(item[0], dict) else None
        if match is None:
            raise MatchNotFound(fixture_id)
        return match

    async def build(self, match: Match, generation: int = 0) -> MatchIntelligence:
        """
        Run the forward pipeline: orchestrate, normalize, fall back, score.

        Raises:
            AggregateFetchError: every domain query failed.
        """
        details = await self.orchestrator.fetch_details(match)
        signals = resolve_signals(match, details)
        analysis = analyze(match, details, signals=signals)
        return MatchIntelligence(
            generation=generation,
            match=match,
            details=details,
            signals=signals,
            analysis=analysis,
        )

    def invalidate_catalog(self, view: Optional[ViewMode] = None) -> None:
        if view is None:
            self._catalogs.invalidate()
        else:
            self._catalogs.invalidate(view)


class IntelligenceFeed:
    """
    Holds the authoritative MatchIntelligence for the selected match.

    Every run is numbered. A run that completes after a newer run has
    started is discarded, never merged, even if it finishes last. In-flight
    requests of a superseded run are not cancelled.
    """

    def __init__(self, service: IntelligenceService):
        self.service = service
        self._generation = 0
        self._current: Optional[MatchIntelligence] = None
        self.selected: Optional[Match] = None
        self.live_view_active = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current(self) -> Optional[MatchIntelligence]:
        return self._current

    def select(self, match: Match, live_view: bool = False) -> None:
        if self.selected is None or self.selected.fixture_id != match.fixture_id:
            self._current = None
        self.selected = match
        self.live_view_active = live_view

    def clear(self) -> None:
        self._generation += 1  # anything still in flight is now stale
        self._current = None
        self.selected = None
        self.live_view_active = False

    async def run(self, match: Optional[Match] = None) -> Optional[MatchIntelligence]:
        """
        Start a new run for `match` (default: the selected match).

        Returns the result when this run is still the newest on completion,
        None when a newer run started meanwhile.
        """
        target = match or self.selected
        if target is None:
            return None

        self._generation += 1
        generation = self._generation
        try:
            result = await self.service.build(target, generation=generation)
        except Exception as e:
            if generation != self._generation:
                logger.info(f"[FEED] Superseded run {generation} for fixture {target.fixture_id} failed: {e}")
                self._record_superseded()
                return None
            raise

        if generation != self._generation:
            logger.info(
                f"[FEED] Discarding run {generation} for fixture {target.fixture_id} "
                f"(newest is {self._generation})"
            )
            self._record_superseded()
            return None

        self._current = result
        return result

    @staticmethod
    def _record_superseded() -> None:
        try:
            from pitchpulse.telemetry import record_superseded_run

            record_superseded_run()
        except Exception as e:
            logger.debug(f"Telemetry skipped: {e}")
