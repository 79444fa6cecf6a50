import json
import logging
import os
from unittest.mock import patch

from fastapi.testclient import TestClient

from opsdash.main import app
from opsdash.observability.logger import _sanitize_value, init_sentry, log_event, timing
from opsdash.routes.health import get_last_action, update_last_action


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_healthz_basic(self):
        """Test basic health check without a recorded action."""
        client = TestClient(app)

        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["backend_driver"] == "mock"
        assert data["observability"] == {"enabled": False, "sentry_configured": False}
        assert "last_action" not in data

    def test_healthz_with_last_action(self):
        client = TestClient(app)
        update_last_action("cancel", success=True, meeting_id=3, duration_ms=12.345)

        data = client.get("/healthz").json()

        last = data["last_action"]
        assert last["action"] == "cancel"
        assert last["meeting_id"] == 3
        assert last["duration_ms"] == 12.35
        assert last["success"] is True
        assert "error" not in last

    def test_healthz_with_error(self):
        client = TestClient(app)
        update_last_action("book", success=False, error="Slot already booked")

        last = client.get("/healthz").json()["last_action"]

        assert last["success"] is False
        assert last["error"] == "Slot already booked"

    def test_failed_action_recorded(self, session):
        client = TestClient(app)

        client.post("/booking/meetings", json={"meeting_name": "Sync"})

        assert get_last_action()["action"] == "book"
        assert get_last_action()["success"] is False

    def test_ready_pending_until_availability_loaded(self, session):
        client = TestClient(app)

        response = client.get("/healthz/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
        assert response.json()["checks"]["availability"] == "pending"

        client.get("/booking/availability")
        response = client.get("/healthz/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["checks"]["availability"] == "ok"

    def test_live(self):
        client = TestClient(app)

        response = client.get("/healthz/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestObservability:
    """Structured logging helpers."""

    def test_log_event_is_json(self, caplog):
        with caplog.at_level(logging.INFO, logger="opsdash.observability.logger"):
            log_event("cancel", "ok", meeting_id=3, status="Confirmed", duration_ms=1.234)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["action"] == "cancel"
        assert entry["outcome"] == "ok"
        assert entry["meeting_id"] == 3
        assert entry["duration_ms"] == 1.23

    def test_sensitive_values_redacted(self):
        assert _sanitize_value("auth_token", "abc") == "[REDACTED]"
        assert _sanitize_value("jitsi_url", "https://meet.jit.si/x") == "[REDACTED]"
        assert len(_sanitize_value("notes", "x" * 500)) == 100

    def test_timing(self):
        with timing("op") as t:
            pass

        assert t.get_duration_ms() >= 0

    def test_sentry_disabled_by_default(self):
        assert init_sentry() is False

    def test_sentry_without_dsn(self):
        with patch.dict(os.environ, {"OBS_ENABLED": "true"}):
            assert init_sentry() is False

    def test_sentry_initialized(self):
        with patch.dict(os.environ, {"OBS_ENABLED": "true", "SENTRY_DSN": "https://key@sentry.example.com/1"}):
            with patch("opsdash.observability.logger.sentry_sdk.init") as mock_init:
                assert init_sentry() is True

        mock_init.assert_called_once()
