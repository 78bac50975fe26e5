"""HTTP route tests against an in-memory data source."""

import pytest
from fastapi.testclient import TestClient

from pitchpulse import state
from pitchpulse.errors import ProviderError
from pitchpulse.main import app
from pitchpulse.routes import core

from tests.conftest import FakeSource, make_fixture, provider_body

LIVE_FIXTURE = make_fixture(fixture_id=1001, status="2H", elapsed=67, goals=(1, 0))


def _catalog_handler(fixtures, domain_error=None):
    def handle(endpoint, params):
        if endpoint == "fixtures" and "date" in params:
            return provider_body(list(fixtures))
        if domain_error is not None:
            return domain_error
        if endpoint == "fixtures" and "id" in params:
            return provider_body(list(fixtures))
        return provider_body([])

    return handle


@pytest.fixture
def make_client(settings):
    """Build a client over FakeSource; the app lifespan is not entered."""

    def build(handler):
        state.init_state(source=FakeSource(handler), settings=settings)
        return TestClient(app)

    yield build
    state._source = state._service = state._feed = state._refresher = None


class TestCoreRoutes:
    def test_health(self, make_client):
        """Health reports readiness, the refresher and Sentry."""
        client = make_client(_catalog_handler([]))
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "state_ready": True,
            "live_refresh_running": False,
            "sentry_enabled": False,
        }

    def test_metrics_open_without_token(self, make_client):
        """Metrics are open when no token is configured."""
        client = make_client(_catalog_handler([]))
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "pp_provider_requests_total" in response.text

    def test_metrics_requires_bearer_token(self, make_client, settings, monkeypatch):
        """A configured token must be sent as a bearer header."""
        settings.METRICS_BEARER_TOKEN = "s3cret"
        monkeypatch.setattr(core, "get_settings", lambda: settings)
        client = make_client(_catalog_handler([]))

        assert client.get("/metrics").status_code == 401
        assert client.get("/metrics", headers={"Authorization": "Bearer nope"}).status_code == 401
        assert client.get("/metrics", headers={"Authorization": "Bearer s3cret"}).status_code == 200


class TestMatchRoutes:
    """Catalog and intelligence endpoints."""

    def test_list_matches(self, make_client):
        """The live view lists in-play fixtures with their clock."""
        client = make_client(_catalog_handler([LIVE_FIXTURE, make_fixture(fixture_id=2, status="FT")]))
        response = client.get("/matches", params={"view": "live"})

        assert response.status_code == 200
        body = response.json()
        assert body["view"] == "live"
        assert body["count"] == 1
        assert body["matches"][0]["clock"] == "67'"

    def test_list_matches_unknown_view(self, make_client):
        """An unknown view is rejected."""
        client = make_client(_catalog_handler([]))
        assert client.get("/matches", params={"view": "yesterday"}).status_code == 422

    def test_catalog_unavailable(self, make_client):
        """A provider outage is a 503 with Retry-After."""
        client = make_client(lambda endpoint, params: ProviderError(endpoint, "http_5xx", "HTTP 502", 502))
        response = client.get("/matches")

        assert response.status_code == 503
        assert response.json()["detail"] == "Could not load matches. Please try again."
        assert response.headers["Retry-After"] == "5"

    def test_intelligence(self, make_client):
        """Intelligence returns the match, details and analysis."""
        client = make_client(_catalog_handler([LIVE_FIXTURE]))
        response = client.get("/matches/1001/intelligence", params={"view": "live"})

        assert response.status_code == 200
        body = response.json()
        assert body["match"]["fixture_id"] == 1001
        assert body["details"]["domain_status"]["live_stats"] == "absent"
        assert body["analysis"]["prediction"] == "Contested match"
        assert body["generation"] == 1

    def test_intelligence_unknown_fixture(self, make_client):
        """An unknown fixture is a 404."""
        client = make_client(_catalog_handler([]))
        assert client.get("/matches/999/intelligence").status_code == 404

    def test_intelligence_all_domains_failed(self, make_client):
        """All domains failing is a 503."""
        error = ProviderError("any", "timeout", "Request timeout")
        client = make_client(_catalog_handler([make_fixture(fixture_id=5)], domain_error=error))
        response = client.get("/matches/5/intelligence")

        assert response.status_code == 503
        assert response.json()["detail"] == "Could not load match details. Please try again."


class TestLiveRoutes:
    def test_watch_current_unwatch(self, make_client):
        """Watching, reading and unwatching a live fixture."""
        client = make_client(_catalog_handler([LIVE_FIXTURE]))

        watched = client.post("/live/watch/1001")
        assert watched.status_code == 200
        assert watched.json()["watching"] == 1001
        assert watched.json()["is_live"] is True
        assert watched.json()["intelligence"]["match"]["fixture_id"] == 1001

        current = client.get("/live/current").json()
        assert current["watching"] == 1001
        assert current["live_view_active"] is True
        assert current["intelligence"]["generation"] == current["generation"]

        # Browsing the same fixture keeps the live view on
        client.get("/matches/1001/intelligence", params={"view": "live"})
        assert client.get("/live/current").json()["live_view_active"] is True

        unwatched = client.delete("/live/watch")
        assert unwatched.json() == {"watching": None, "previous": 1001}
        current = client.get("/live/current").json()
        assert current["watching"] is None
        assert current["intelligence"] is None

    def test_watch_unknown_fixture(self, make_client):
        """Watching an unknown fixture is a 404."""
        client = make_client(_catalog_handler([]))
        assert client.post("/live/watch/31337").status_code == 404
