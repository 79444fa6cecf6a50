"""
Meeting Lifecycle Manager.

Owns the meeting list and the availability index for one dashboard and runs
every scheduling command against the backend. Local state only changes from
fresh fetches: a command never edits the lists itself, it re-fetches once the
backend has confirmed.

Commands whose action the meeting's status does not offer (per
opsdash.scheduling.actions) are no-ops that return None without touching the
network.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from opsdash.backend.provider import MeetingId, SchedulingBackend
from opsdash.observability.logger import log_event, log_warning, timing
from opsdash.scheduling.actions import MeetingAction, actions_for, is_allowed
from opsdash.scheduling.availability import AvailabilityIndex, index_slots
from opsdash.scheduling.errors import NotFoundError, SchedulingError, ValidationError
from opsdash.scheduling.selection import SLOT_REQUIRED_MESSAGE, SlotSelector
from opsdash.scheduling.types import (
    Attachment,
    AvailableSlot,
    Category,
    CreatedRecord,
    Meeting,
    Project,
    Task,
)
from opsdash.utils.cache import TTLCache
from opsdash.utils.dates import normalize_time

logger = logging.getLogger(__name__)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class MeetingLifecycleManager:
    def __init__(self, backend: SchedulingBackend, picker_cache: Optional[TTLCache] = None):
        self.backend = backend
        self.picker_cache = picker_cache if picker_cache is not None else TTLCache(default_ttl_seconds=300)
        self._slots: List[AvailableSlot] = []
        self._index = AvailabilityIndex()
        self._meetings: List[Meeting] = []
        self.availability_loaded = False
        self.meetings_loaded = False

    @property
    def slots(self) -> List[AvailableSlot]:
        return list(self._slots)

    @property
    def index(self) -> AvailabilityIndex:
        return self._index

    @property
    def meetings(self) -> List[Meeting]:
        return list(self._meetings)

    def get_meeting(self, meeting_id: Optional[MeetingId]) -> Optional[Meeting]:
        if _blank(meeting_id):
            return None
        for meeting in self._meetings:
            if str(meeting.id) == str(meeting_id):
                return meeting
        return None

    def require_meeting(self, meeting_id: Optional[MeetingId]) -> Meeting:
        if _blank(meeting_id):
            raise NotFoundError("Meeting not found")
        meeting = self.get_meeting(meeting_id)
        if meeting is None:
            raise NotFoundError(f"Meeting {meeting_id} not found", meeting_id=meeting_id)
        return meeting

    def _skip(self, action: MeetingAction, meeting: Meeting) -> None:
        log_event(action.value, "skipped", meeting_id=meeting.id, status=meeting.status.value)
        return None

    def actions_for(self, meeting: Meeting):
        return actions_for(meeting)

    # Queries

    async def refresh_availability(self) -> AvailabilityIndex:
        """Fetch slots and rebuild the index; the previous list is superseded, never merged."""
        with timing("refresh_availability") as t:
            slots = await self.backend.fetch_available_slots()
        self._slots = slots
        self._index = index_slots(slots)
        self.availability_loaded = True
        log_event(
            "refresh_availability",
            "ok",
            duration_ms=t.get_duration_ms(),
            slot_count=len(slots),
            date_count=len(self._index.unique_dates),
        )
        return self._index

    async def refresh_meetings(self) -> List[Meeting]:
        with timing("refresh_meetings") as t:
            meetings = await self.backend.fetch_meetings()
        self._meetings = meetings
        self.meetings_loaded = True
        log_event("refresh_meetings", "ok", duration_ms=t.get_duration_ms(), meeting_count=len(meetings))
        return self.meetings

    async def _refresh_after(self, action: str, availability: bool = True) -> None:
        """
        Re-fetch after a confirmed command.

        The command already succeeded on the backend, so a failed re-fetch is
        logged and leaves the previous lists in place until the next refresh.
        """
        try:
            if availability:
                await self.refresh_availability()
            await self.refresh_meetings()
        except SchedulingError as e:
            log_warning(
                "Re-fetch after successful command failed",
                {"action": action, "error": e.message},
            )

    # Commands

    async def create(
        self,
        project_name: Optional[str],
        category_id: Union[int, str, None],
        meeting_name: Optional[str],
        slot: Optional[AvailableSlot] = None,
        description: Optional[str] = None,
        note: Optional[str] = None,
        attachment: Optional[Attachment] = None,
        selector: Optional[SlotSelector] = None,
    ) -> CreatedRecord:
        """
        Create a project together with its first meeting request.

        Validation runs before any network call, in form order: project
        name, category, meeting name. The slot is optional here; when given
        its times are submitted as HH:MM.
        """
        if _blank(project_name):
            raise ValidationError("project_name", "Project name is required")
        if _blank(category_id):
            raise ValidationError("category", "Category is required")
        if _blank(meeting_name):
            raise ValidationError("meeting_name", "Meeting name is required")

        if slot is None and selector is not None:
            slot = selector.selected_slot

        fields: Dict[str, str] = {
            "name": project_name.strip(),  # type: ignore[union-attr]
            "category": str(category_id),
            "meeting_name": meeting_name.strip(),  # type: ignore[union-attr]
        }
        if slot is not None:
            fields["start_time"] = normalize_time(slot.start_time)
            fields["end_time"] = normalize_time(slot.end_time)
            fields["slot_id"] = str(slot.slot_id)
        if not _blank(description):
            fields["description"] = description  # type: ignore[assignment]
        if not _blank(note):
            fields["note"] = note  # type: ignore[assignment]

        with timing("create") as t:
            record = await self.backend.create_project(fields, attachment=attachment)
        log_event(
            "create",
            "ok",
            duration_ms=t.get_duration_ms(),
            slot_id=slot.slot_id if slot else None,
            has_attachment=attachment is not None,
        )

        if selector is not None:
            selector.reset()
        await self._refresh_after("create")
        return record

    async def book(
        self,
        project_id: Union[int, str, None],
        task_id: Union[int, str, None],
        meeting_name: Optional[str],
        selector: SlotSelector,
        description: Optional[str] = None,
    ) -> CreatedRecord:
        """Book a meeting for an existing project task in the selector's slot."""
        slot = selector.require_slot()
        if _blank(meeting_name):
            raise ValidationError("meeting_name", "Meeting title is required")
        if _blank(project_id):
            raise ValidationError("project_id", "Please select a project")
        if _blank(task_id):
            raise ValidationError("task_id", "Please select a task")

        payload = {
            "slot_id": slot.slot_id,
            "task_id": task_id,
            "meeting_name": meeting_name.strip(),  # type: ignore[union-attr]
            "description": description or "",
            "start_time": normalize_time(slot.start_time),
            "end_time": normalize_time(slot.end_time),
            "project_id": project_id,
        }

        with timing("book") as t:
            record = await self.backend.create_meeting(payload)
        log_event("book", "ok", meeting_id=record.id, duration_ms=t.get_duration_ms(), slot_id=slot.slot_id)

        selector.reset()
        await self._refresh_after("book")
        return record

    async def reschedule(
        self,
        meeting_id: Optional[MeetingId],
        new_slot: Optional[AvailableSlot],
        meeting_name: Optional[str],
        description: Optional[str] = None,
        status: Optional[str] = None,
        jitsi_url: Optional[str] = None,
        project_id: Optional[int] = None,
        selector: Optional[SlotSelector] = None,
    ) -> Optional[Meeting]:
        """
        Move a meeting to a new slot.

        The meeting id is checked first, then slot, name and project. The id
        is preserved; the returned meeting comes from the re-fetched list.
        """
        meeting = self.require_meeting(meeting_id)
        if not is_allowed(meeting.status, MeetingAction.RESCHEDULE):
            return self._skip(MeetingAction.RESCHEDULE, meeting)

        if new_slot is None and selector is not None:
            new_slot = selector.selected_slot
        if new_slot is None:
            raise ValidationError("slot", SLOT_REQUIRED_MESSAGE)
        if _blank(meeting_name):
            raise ValidationError("meeting_name", "Meeting name is required")
        if project_id is None:
            project_id = meeting.project_id
        if project_id is None:
            raise ValidationError("project_id", "Project is required")

        payload: Dict[str, Any] = {
            "slot_id": new_slot.slot_id,
            "meeting_name": meeting_name.strip(),  # type: ignore[union-attr]
            "description": description or "",
            "start_time": normalize_time(new_slot.start_time),
            "end_time": normalize_time(new_slot.end_time),
            "project_id": project_id,
        }
        if jitsi_url:
            payload["jitsi_url"] = jitsi_url
        if status:
            payload["status"] = status

        with timing("reschedule") as t:
            await self.backend.reschedule_meeting(meeting.id, payload)
        log_event(
            "reschedule",
            "ok",
            meeting_id=meeting.id,
            status=meeting.status.value,
            duration_ms=t.get_duration_ms(),
            slot_id=new_slot.slot_id,
        )

        if selector is not None:
            selector.reset()
        await self._refresh_after("reschedule")
        return self.get_meeting(meeting.id) or meeting

    async def cancel(self, meeting_id: Optional[MeetingId]) -> Optional[Meeting]:
        meeting = self.require_meeting(meeting_id)
        if not is_allowed(meeting.status, MeetingAction.CANCEL):
            return self._skip(MeetingAction.CANCEL, meeting)

        with timing("cancel") as t:
            await self.backend.cancel_meeting(meeting.id)
        log_event("cancel", "ok", meeting_id=meeting.id, status=meeting.status.value, duration_ms=t.get_duration_ms())

        await self._refresh_after("cancel", availability=False)
        return self.get_meeting(meeting.id) or meeting

    async def delete(self, meeting_id: Optional[MeetingId]) -> Optional[Meeting]:
        """Delete a Completed or Canceled meeting; returns the meeting as it was before deletion."""
        meeting = self.require_meeting(meeting_id)
        if not is_allowed(meeting.status, MeetingAction.DELETE):
            return self._skip(MeetingAction.DELETE, meeting)

        with timing("delete") as t:
            await self.backend.delete_meeting(meeting.id)
        log_event("delete", "ok", meeting_id=meeting.id, status=meeting.status.value, duration_ms=t.get_duration_ms())

        await self._refresh_after("delete", availability=False)
        return meeting

    async def join(self, meeting_id: Optional[MeetingId]) -> Optional[str]:
        """Resolve the conferencing URL. Meeting state is not touched."""
        meeting = self.require_meeting(meeting_id)
        if not is_allowed(meeting.status, MeetingAction.JOIN):
            return self._skip(MeetingAction.JOIN, meeting)

        with timing("join") as t:
            url = await self.backend.join_meeting(meeting.id)
        log_event("join", "ok", meeting_id=meeting.id, status=meeting.status.value, duration_ms=t.get_duration_ms())
        return url

    async def add_notes(self, meeting_id: Optional[MeetingId], notes: Optional[str]) -> Optional[Meeting]:
        """Attach notes to a meeting the backend has flagged as accepting them."""
        meeting = self.require_meeting(meeting_id)
        if _blank(notes):
            raise ValidationError("notes", "Notes cannot be empty")
        if not meeting.can_add_notes:
            log_event("add_notes", "skipped", meeting_id=meeting.id, status=meeting.status.value)
            return None

        with timing("add_notes") as t:
            await self.backend.add_meeting_notes(meeting.id, notes.strip())  # type: ignore[union-attr]
        log_event("add_notes", "ok", meeting_id=meeting.id, duration_ms=t.get_duration_ms())

        await self._refresh_after("add_notes", availability=False)
        return self.get_meeting(meeting.id) or meeting

    # Picker data

    async def categories(self) -> List[Category]:
        return await self.picker_cache.get_or_fetch("categories", self.backend.fetch_categories)

    async def projects(self) -> List[Project]:
        return await self.picker_cache.get_or_fetch("projects", self.backend.fetch_projects)

    async def project_tasks(self, project_id: int) -> List[Task]:
        return await self.picker_cache.get_or_fetch(
            f"project_tasks:{project_id}",
            lambda: self.backend.fetch_project_tasks(project_id),
        )
