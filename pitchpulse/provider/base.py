"""Abstract base class for football data sources."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional


class FootballDataSource(ABC):
    """The transport boundary: endpoint + params in, decoded JSON body out.

    Implementations raise `ProviderError` when a request cannot produce a
    decoded JSON object. An empty `response` is NOT an error.
    """

    @abstractmethod
    async def fetch(self, endpoint: str, params: dict) -> dict:
        """
        Fetch one provider endpoint.

        Args:
            endpoint: Provider endpoint (e.g. 'fixtures', 'fixtures/lineups').
            params: Query parameters.

        Returns:
            The decoded JSON body.
        """
        pass

    async def get_fixtures_by_date(self, day: date, timezone: Optional[str] = None) -> dict:
        """All fixtures worldwide for one day (filtered in memory by the catalog)."""
        params = {"date": day.isoformat()}
        if timezone:
            params["timezone"] = timezone
        return await self.fetch("fixtures", params)

    async def get_fixture(self, fixture_id: int) -> dict:
        """A single fixture by its id."""
        return await self.fetch("fixtures", {"id": fixture_id})

    async def close(self) -> None:
        """Close any open connections."""
        return None
