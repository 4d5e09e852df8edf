from unittest import mock

from modules.core import views
from modules.core.models import EventStatus, OutboxEvent


def _outbox_row(status):
    return OutboxEvent.objects.create(
        event_type="OrderCreated",
        aggregate_id="0190f7a1-0000-7000-8000-000000000000",
        payload={},
        topic="orders",
        status=status,
    )


class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["services"]["database"]["status"] == "up"
        assert "response_time_ms" in data["services"]["cache"]

    def test_needs_no_token(self, api_client):
        assert api_client.get("/health").status_code == 200

    def test_reports_outbox_backlog(self, client):
        _outbox_row(EventStatus.PENDING)
        _outbox_row(EventStatus.PENDING)
        _outbox_row(EventStatus.FAILED)
        _outbox_row(EventStatus.PUBLISHED)

        data = client.get("/health").json()

        assert data["outbox"] == {"pending": 2, "failed": 1}

    def test_cache_failure_is_503(self, client):
        with mock.patch.dict(
            views.PROBES, {"cache": mock.Mock(side_effect=ConnectionError("down"))}
        ):
            response = client.get("/health")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["services"]["cache"] == {"status": "down"}
        assert data["services"]["database"]["status"] == "up"
