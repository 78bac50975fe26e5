"""Exception hierarchy for PitchPulse."""

from typing import Optional


class PitchPulseError(Exception):
    """Base class for all PitchPulse errors."""


class ProviderError(PitchPulseError):
    """A single provider request failed (transport or payload level).

    `code` is a low-cardinality tag (timeout, request_error, http_503,
    parse_error, api_error, rate_limit) safe to use as a metric label.
    """

    def __init__(self, endpoint: str, code: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.code = code
        self.message = message
        self.status_code = status_code


class CatalogUnavailable(PitchPulseError):
    """Raised when the day's fixture list cannot be retrieved at all."""

    def __init__(self, message: str = "Could not load matches. Please try again."):
        super().__init__(message)
        self.message = message


class AggregateFetchError(PitchPulseError):
    """Raised when every issued domain query of an orchestration run failed."""

    def __init__(self, fixture_id: int, failed_domains: list[str]):
        self.fixture_id = fixture_id
        self.failed_domains = failed_domains
        self.message = "Could not load match details. Please try again."
        super().__init__(f"{self.message} (fixture={fixture_id}, failed={len(failed_domains)})")


class MatchNotFound(PitchPulseError):
    """Raised when a fixture id cannot be resolved to a Match."""

    def __init__(self, fixture_id: int):
        self.fixture_id = fixture_id
        super().__init__(f"Fixture {fixture_id} not found")
