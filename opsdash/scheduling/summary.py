"""
Post-meeting summary viewer.

Holds at most one summary, for the meeting currently being viewed. Opening a
different meeting clears the old summary straight away, and a response that
arrives for a meeting the viewer has moved away from is dropped.
"""
from enum import Enum
from typing import Any, Dict, Optional

from opsdash.backend.provider import MeetingId, SchedulingBackend
from opsdash.observability.logger import log_event, timing
from opsdash.scheduling.actions import MeetingAction, is_allowed
from opsdash.scheduling.errors import SchedulingError
from opsdash.scheduling.types import Meeting, MeetingSummary


class SummaryState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


def _same_id(a: Optional[MeetingId], b: Optional[MeetingId]) -> bool:
    return a is not None and b is not None and str(a) == str(b)


class SummaryViewer:
    def __init__(self, backend: SchedulingBackend):
        self.backend = backend
        self.meeting_id: Optional[MeetingId] = None
        self.summary: Optional[MeetingSummary] = None
        self.state = SummaryState.IDLE
        self.error: Optional[str] = None

    def open(self, meeting: Meeting) -> bool:
        """Point the viewer at meeting. Returns False if its status has no summary."""
        if not is_allowed(meeting.status, MeetingAction.VIEW_SUMMARY):
            log_event("view_summary", "skipped", meeting_id=meeting.id, status=meeting.status.value)
            return False
        self.meeting_id = meeting.id
        self.summary = None
        self.error = None
        self.state = SummaryState.LOADING
        return True

    def accept(self, meeting_id: MeetingId, summary: MeetingSummary) -> bool:
        """Store summary if it belongs to the meeting still being viewed."""
        if not _same_id(meeting_id, self.meeting_id):
            log_event("view_summary", "discarded", meeting_id=meeting_id, current=self.meeting_id)
            return False
        self.summary = summary
        self.state = SummaryState.LOADED
        return True

    async def load(self) -> Optional[MeetingSummary]:
        requested = self.meeting_id
        if requested is None:
            return None

        try:
            with timing("view_summary") as t:
                summary = await self.backend.fetch_meeting_summary(requested)
        except SchedulingError as e:
            if not _same_id(requested, self.meeting_id):
                log_event("view_summary", "discarded", meeting_id=requested, error=e.message)
                return None
            self.state = SummaryState.ERROR
            self.error = e.message
            raise

        if not self.accept(requested, summary):
            return None
        log_event("view_summary", "ok", meeting_id=requested, duration_ms=t.get_duration_ms())
        return summary

    async def show(self, meeting: Meeting) -> Optional[MeetingSummary]:
        if not self.open(meeting):
            return None
        return await self.load()

    def close(self) -> None:
        self.meeting_id = None
        self.summary = None
        self.error = None
        self.state = SummaryState.IDLE

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "meeting_id": self.meeting_id,
            "summary": self.summary.model_dump() if self.summary else None,
            "error": self.error,
        }
