from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from opsdash.main import app
from opsdash.scheduling.errors import NetworkError


class TestAvailabilityEndpoint:
    """Test /booking/availability."""

    def test_index(self, session):
        client = TestClient(app)

        response = client.get("/booking/availability")

        assert response.status_code == 200
        data = response.json()
        assert data["unique_dates"] == ["2025-12-01", "2025-12-02", "2025-12-03"]
        assert data["slot_count"] == 5

    def test_single_date(self, session):
        client = TestClient(app)

        response = client.get("/booking/availability?date=2025-12-03")

        assert [s["slot_id"] for s in response.json()["slots"]] == [103, 105]

    def test_backend_failure(self, session):
        client = TestClient(app)
        failing = AsyncMock(side_effect=NetworkError("Failed to load available slots."))

        with patch.object(session.backend, "fetch_available_slots", failing):
            response = client.get("/booking/availability")

        assert response.status_code == 502
        assert response.json()["notification"] == {
            "level": "error",
            "message": "Failed to load available slots.",
        }

    def test_api_key_required_when_configured(self, session, monkeypatch):
        monkeypatch.setenv("API_KEY", "secret")
        client = TestClient(app)

        assert client.get("/booking/availability").status_code == 401
        assert client.get("/booking/availability", headers={"X-API-Key": "secret"}).status_code == 200


class TestSlotSelection:
    def test_pick_date_then_slot(self, session):
        client = TestClient(app)
        client.get("/booking/availability")

        state = client.post("/booking/select-date", json={"date": "2025-12-02"}).json()
        assert state["phase"] == "date_chosen"
        assert [s["slot_id"] for s in state["slots"]] == [104]

        response = client.post("/booking/select-slot", json={"slot_id": 104})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phase"] == "slot_chosen"
        assert data["display_date"] == "02 Dec 2025"
        assert data["display_time"] == "14:00 - 14:45"

    def test_changing_date_drops_slot(self, session):
        client = TestClient(app)
        client.get("/booking/availability")
        client.post("/booking/select-date", json={"date": "2025-12-02"})
        client.post("/booking/select-slot", json={"slot_id": 104})

        state = client.post("/booking/select-date", json={"date": "2025-12-03"}).json()

        assert state["selected_slot"] is None
        assert state["phase"] == "date_chosen"

    def test_slot_from_other_date_rejected(self, session):
        client = TestClient(app)
        client.get("/booking/availability")
        client.post("/booking/select-date", json={"date": "2025-12-02"})

        response = client.post("/booking/select-slot", json={"slot_id": 101})

        assert response.status_code == 422
        assert response.json()["field"] == "slot"

    def test_reset(self, session):
        client = TestClient(app)
        client.post("/booking/select-date", json={"date": "2025-12-02"})

        state = client.post("/booking/reset").json()

        assert state["phase"] == "unselected"


class TestBookMeeting:
    """Test POST /booking/meetings."""

    def test_requires_slot(self, session):
        client = TestClient(app)

        response = client.post("/booking/meetings", json={"project_id": 13, "task_id": 203, "meeting_name": "Sync"})

        assert response.status_code == 422
        body = response.json()
        assert body["ok"] is False
        assert body["field"] == "slot"
        assert body["notification"]["message"] == "Please select a date and time slot"

    def test_books_selected_slot(self, session):
        client = TestClient(app)
        client.get("/booking/availability")
        client.post("/booking/select-date", json={"date": "2025-12-02"})
        client.post("/booking/select-slot", json={"slot_id": 104})

        response = client.post(
            "/booking/meetings",
            json={"project_id": 13, "task_id": 203, "meeting_name": "Design review"},
        )

        assert response.status_code == 200
        assert response.json()["notification"]["level"] == "success"
        assert client.get("/booking/availability?date=2025-12-02").json()["slots"] == []
        assert client.get("/booking/state").json()["phase"] == "unselected"

    def test_backend_rejection_keeps_selection(self, session):
        client = TestClient(app)
        client.get("/booking/availability")
        client.post("/booking/select-date", json={"date": "2025-12-02"})
        client.post("/booking/select-slot", json={"slot_id": 104})
        failing = AsyncMock(side_effect=NetworkError("Slot already booked", status_code=409))

        with patch.object(session.backend, "create_meeting", failing):
            response = client.post(
                "/booking/meetings",
                json={"project_id": 13, "task_id": 203, "meeting_name": "Design review"},
            )

        assert response.status_code == 409
        assert response.json()["notification"]["message"] == "Slot already booked"
        assert client.get("/booking/state").json()["phase"] == "slot_chosen"


class TestCreateProject:
    """Test POST /booking/projects."""

    def test_blank_name(self, session):
        client = TestClient(app)

        response = client.post("/booking/projects", data={"name": "", "category": "3", "meeting_name": "Kickoff"})

        assert response.status_code == 422
        assert response.json()["field"] == "project_name"

    def test_create_with_attachment(self, session):
        client = TestClient(app)
        client.get("/booking/availability")
        client.post("/booking/select-date", json={"date": "2025-12-01"})
        client.post("/booking/select-slot", json={"slot_id": 101})

        response = client.post(
            "/booking/projects",
            data={"name": "Marketly", "category": "3", "meeting_name": "Kickoff"},
            files={"attachment": ("brief.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 200
        assert response.json()["notification"]["message"] == "Meeting created successfully"
        titles = [m["title"] for m in client.get("/meetings").json()["meetings"]]
        assert "Kickoff" in titles


class TestPickerData:
    def test_categories(self, session):
        client = TestClient(app)

        response = client.get("/booking/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()["data"]][:2] == ["Development", "Design"]

    def test_project_tasks(self, session):
        client = TestClient(app)

        response = client.get("/booking/projects/13/tasks")

        assert [t["id"] for t in response.json()["data"]] == [203, 204]
