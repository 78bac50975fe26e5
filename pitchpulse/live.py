"""Live view refresh: an external interval job that re-invokes the feed."""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from pitchpulse.config import Settings, get_settings
from pitchpulse.errors import PitchPulseError
from pitchpulse.models import ViewMode
from pitchpulse.service import IntelligenceFeed, MatchIntelligence

logger = logging.getLogger(__name__)

JOB_ID = "live_refresh"


class LiveRefresher:
    """
    Re-runs the selected match's orchestration on a fixed interval while the
    live view is active. The feed decides which run is authoritative; this
    class only knows about the timer.
    """

    def __init__(
        self,
        feed: IntelligenceFeed,
        settings: Optional[Settings] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.feed = feed
        self.settings = settings or get_settings()
        self.scheduler = scheduler or AsyncIOScheduler()
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self) -> None:
        """Register the interval job and start the scheduler (idempotent)."""
        if self._started:
            logger.warning("Live refresher already started, skipping duplicate initialization")
            return

        self.scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.settings.LIVE_REFRESH_SECONDS),
            id=JOB_ID,
            name=f"Live view refresh (every {self.settings.LIVE_REFRESH_SECONDS}s)",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        self._started = True
        logger.info(f"Live refresher started: every {self.settings.LIVE_REFRESH_SECONDS} seconds")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self._started = False
        logger.info("Live refresher stopped")

    async def tick(self) -> Optional[MatchIntelligence]:
        """One refresh: reload the live catalog, then re-run the selected match."""
        from pitchpulse.telemetry import record_refresh_job

        selected = self.feed.selected
        if not self.feed.live_view_active or selected is None:
            record_refresh_job("skipped")
            return None

        service = self.feed.service
        target = selected
        try:
            page = await service.list_matches(ViewMode.LIVE, use_cache=False)
            for match in page.matches:
                if match.fixture_id == selected.fixture_id:
                    target = match
                    break
            else:
                logger.info(f"[LIVE] Fixture {selected.fixture_id} left the live catalog, refreshing last snapshot")
        except PitchPulseError as e:
            logger.warning(f"[LIVE] Live catalog refresh failed: {e}")

        current = self.feed.selected
        if not self.feed.live_view_active or current is None or current.fixture_id != selected.fixture_id:
            # selection changed while the catalog was loading
            record_refresh_job("skipped")
            return None

        self.feed.select(target, live_view=True)
        try:
            result = await self.feed.run(target)
        except PitchPulseError as e:
            logger.error(f"[LIVE] Refresh for fixture {target.fixture_id} failed: {e}")
            record_refresh_job("error")
            return None

        record_refresh_job("ok")
        return result
