"""API-Football transport (supports RapidAPI, API-Sports and pass-through proxies)."""

import asyncio
import logging
import time
from typing import Optional

import httpx

from pitchpulse.config import Settings, get_settings
from pitchpulse.errors import ProviderError
from pitchpulse.provider.base import FootballDataSource

logger = logging.getLogger(__name__)


def build_endpoint_config(settings: Settings) -> tuple[str, dict]:
    """Resolve (base_url, headers) for the configured provider access mode."""
    if settings.API_BASE_URL:
        # Proxy holds the key server-side
        return settings.API_BASE_URL.rstrip("/"), {}

    host = settings.RAPIDAPI_HOST
    if "api-sports.io" in host:
        # API-Sports direct
        return f"https://{host}", {"x-apisports-key": settings.RAPIDAPI_KEY}

    # RapidAPI
    return f"https://{host}/v3", {
        "X-RapidAPI-Key": settings.RAPIDAPI_KEY,
        "X-RapidAPI-Host": host,
    }


class APIFootballClient(FootballDataSource):
    """API-Football client with 429 backoff and request telemetry.

    Only rate limiting is retried here. Every other failure surfaces as a
    `ProviderError` and the orchestrator decides what it means for the domain.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.BASE_URL, headers = build_endpoint_config(self.settings)

        client_kwargs = {
            "headers": headers,
            "timeout": self.settings.API_TIMEOUT_SECONDS,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.AsyncClient(**client_kwargs)

        self.requests_per_minute = self.settings.API_REQUESTS_PER_MINUTE
        self.max_retries = max(0, self.settings.API_RATE_LIMIT_RETRIES)
        self.retry_delay = self.settings.API_RATE_LIMIT_BACKOFF_SECONDS

    async def fetch(self, endpoint: str, params: dict) -> dict:
        return await self._rate_limited_request(endpoint, params)

    async def _rate_limited_request(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """
        Make a rate-limited request to the API.

        After each successful response the caller waits
        60 / API_REQUESTS_PER_MINUTE seconds before getting the body. The pause
        is per call, so concurrent callers are not spaced against each other.
        Backs off exponentially on 429 responses.

        Args:
            endpoint: API endpoint to call
            params: Query parameters

        Raises:
            ProviderError: on timeout, transport error, HTTP error, an
                undecodable body, a non-object body or provider `errors`.
        """
        delay = 60 / self.requests_per_minute if self.requests_per_minute > 0 else 0
        url = f"{self.BASE_URL}/{endpoint}"

        # Telemetry helper (best-effort, never block)
        def record_telemetry(status_code: int, latency_ms: float, error_code: Optional[str] = None):
            try:
                from pitchpulse.telemetry import record_provider_request, record_provider_error

                record_provider_request(endpoint=endpoint, status_code=status_code, latency_ms=latency_ms)
                if error_code:
                    record_provider_error(endpoint=endpoint, error_code=error_code)
            except Exception as e:
                logger.debug(f"Telemetry skipped: {e}")

        for attempt in range(self.max_retries + 1):
            start_time = time.time()
            try:
                response = await self.client.get(url, params=params)
                latency_ms = (time.time() - start_time) * 1000

                if response.status_code == 429:
                    record_telemetry(429, latency_ms, error_code="rate_limit")
                    if attempt < self.max_retries:
                        wait_time = self.retry_delay * (2**attempt)
                        logger.warning(f"[PROVIDER] Rate limited on {endpoint}. Waiting {wait_time}s before retry...")
                        await asyncio.sleep(wait_time)
                        continue
                    raise ProviderError(endpoint, "rate_limit", "Rate limit retries exhausted", status_code=429)

                response.raise_for_status()
                record_telemetry(response.status_code, latency_ms)
                if delay:
                    await asyncio.sleep(delay)  # Respect rate limit

                try:
                    data = response.json()
                except ValueError as e:
                    record_telemetry(response.status_code, latency_ms, error_code="parse_error")
                    raise ProviderError(endpoint, "parse_error", f"Undecodable body: {e}", response.status_code)

                if not isinstance(data, dict):
                    record_telemetry(response.status_code, latency_ms, error_code="parse_error")
                    raise ProviderError(
                        endpoint, "parse_error", f"Expected JSON object, got {type(data).__name__}", response.status_code
                    )

                if data.get("errors"):
                    logger.error(f"[PROVIDER] API error on {endpoint}: {data['errors']}")
                    record_telemetry(response.status_code, latency_ms, error_code="api_error")
                    raise ProviderError(endpoint, "api_error", str(data["errors"]), response.status_code)

                return data

            except httpx.TimeoutException as e:
                latency_ms = (time.time() - start_time) * 1000
                record_telemetry(0, latency_ms, error_code="timeout")
                logger.error(f"[PROVIDER] Timeout on {endpoint}: {e}")
                raise ProviderError(endpoint, "timeout", f"Timeout: {e}") from e

            except httpx.HTTPStatusError as e:
                latency_ms = (time.time() - start_time) * 1000
                status = e.response.status_code
                code = "http_5xx" if status >= 500 else f"http_{status}"
                record_telemetry(status, latency_ms, error_code=code)
                logger.error(f"[PROVIDER] HTTP error on {endpoint}: {e}")
                raise ProviderError(endpoint, code, f"HTTP {status}", status_code=status) from e

            except httpx.RequestError as e:
                latency_ms = (time.time() - start_time) * 1000
                record_telemetry(0, latency_ms, error_code="request_error")
                logger.error(f"[PROVIDER] Request error on {endpoint}: {e}")
                raise ProviderError(endpoint, "request_error", f"Request error: {e}") from e

        raise ProviderError(endpoint, "rate_limit", "Rate limit retries exhausted", status_code=429)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
