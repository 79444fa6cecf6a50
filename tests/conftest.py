import pytest

from opsdash.backend.mock_backend import MockBackend
from opsdash.core.config import AppConfig
from opsdash.routes.health import reset_last_action
from opsdash.scheduling.session import SchedulingSession, set_session
from opsdash.scheduling.types import AvailableSlot, Meeting, MeetingStatus


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep host configuration out of the tests."""
    for name in ("API_KEY", "OBS_ENABLED", "SENTRY_DSN", "BACKEND_DRIVER", "RUN_SCHEDULER", "TIMEZONE"):
        monkeypatch.delenv(name, raising=False)
    reset_last_action()
    yield
    set_session(None)


@pytest.fixture
def make_meeting():
    def _make(
        id=1,
        title="Standup",
        status=MeetingStatus.CONFIRMED,
        date="2025-12-05",
        start_time="09:00:00",
        end_time="09:15:00",
        **kwargs,
    ) -> Meeting:
        return Meeting(
            id=id,
            title=title,
            project=kwargs.pop("project", "FixMate Mobile App"),
            status=status,
            date=date,
            start_time=start_time,
            end_time=end_time,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_slot():
    def _make(slot_id=1, date="2025-12-01", start_time="09:00:00", end_time="09:30:00") -> AvailableSlot:
        return AvailableSlot(slot_id=slot_id, date=date, start_time=start_time, end_time=end_time)

    return _make


@pytest.fixture
def mock_backend():
    return MockBackend()


@pytest.fixture
def session(mock_backend):
    """Process session backed by the in-memory sample backend."""
    s = SchedulingSession(mock_backend, AppConfig())
    set_session(s)
    return s
