from typing import Any, Dict, List, Optional, Protocol

from opsdash.core.config import AppConfig, load_config
from opsdash.scheduling.types import (
    Attachment,
    AvailableSlot,
    Category,
    CreatedRecord,
    Meeting,
    MeetingId,
    MeetingSummary,
    Project,
    Task,
)


class SchedulingBackend(Protocol):
    """
    Backend collaborator for the scheduling core.

    Every call is a network round trip. Implementations raise
    NetworkError/NotFoundError from opsdash.scheduling.errors on failure.
    """

    async def fetch_available_slots(self) -> List[AvailableSlot]:
        ...

    async def fetch_meetings(self) -> List[Meeting]:
        ...

    async def fetch_meeting_summary(self, meeting_id: MeetingId) -> MeetingSummary:
        ...

    async def create_project(
        self, fields: Dict[str, str], attachment: Optional[Attachment] = None
    ) -> CreatedRecord:
        ...

    async def create_meeting(self, payload: Dict[str, Any]) -> CreatedRecord:
        ...

    async def reschedule_meeting(self, meeting_id: MeetingId, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def cancel_meeting(self, meeting_id: MeetingId) -> Dict[str, Any]:
        ...

    async def delete_meeting(self, meeting_id: MeetingId) -> Dict[str, Any]:
        ...

    async def join_meeting(self, meeting_id: MeetingId) -> str:
        ...

    async def add_meeting_notes(self, meeting_id: MeetingId, notes: str) -> Dict[str, Any]:
        ...

    async def fetch_categories(self) -> List[Category]:
        ...

    async def fetch_projects(self) -> List[Project]:
        ...

    async def fetch_project_tasks(self, project_id: int) -> List[Task]:
        ...

    async def aclose(self) -> None:
        ...


def select_backend(config: Optional[AppConfig] = None) -> SchedulingBackend:
    """Factory selecting the backend implementation from BACKEND_DRIVER."""
    cfg = config or load_config()

    if cfg.backend_driver == "mock":
        from opsdash.backend.mock_backend import MockBackend
        return MockBackend()
    elif cfg.backend_driver == "http":
        from opsdash.backend.http_backend import create_http_backend
        return create_http_backend(cfg)
    else:
        raise ValueError(f"Unsupported BACKEND_DRIVER: {cfg.backend_driver}")
