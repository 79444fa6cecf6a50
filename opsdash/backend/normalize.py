"""
Map raw backend payloads onto scheduling models.

The backend is loose about field names (meeting_name vs title, start vs
start_time, date folded into start_time). Everything is reconciled here so
the rest of the package only sees typed models.
"""
import logging
from typing import Any, Dict, List, Optional

from opsdash.scheduling.types import (
    ActionLogEntry,
    Attendee,
    AvailableSlot,
    Category,
    CreatedRecord,
    Meeting,
    MeetingStatus,
    MeetingSummary,
    Project,
    Task,
)

logger = logging.getLogger(__name__)


_STATUS_ALIASES: Dict[str, MeetingStatus] = {
    "requestsent": MeetingStatus.REQUEST_SENT,
    "pending": MeetingStatus.REQUEST_SENT,
    "confirmed": MeetingStatus.CONFIRMED,
    "completed": MeetingStatus.COMPLETED,
    "canceled": MeetingStatus.CANCELED,
    "cancelled": MeetingStatus.CANCELED,
    "waiting": MeetingStatus.WAITING,
}


def parse_status(raw: Any) -> MeetingStatus:
    key = "".join(ch for ch in str(raw or "").lower() if ch.isalpha())
    status = _STATUS_ALIASES.get(key)
    if status is None:
        logger.warning(f"Unknown meeting status {raw!r}, treating as Waiting")
        return MeetingStatus.WAITING
    return status


def _split_datetime(value: str) -> tuple[Optional[str], str]:
    """'2025-12-05 09:00:00' -> ('2025-12-05', '09:00:00'); bare times pass through."""
    value = value.strip()
    for sep in ("T", " "):
        if sep in value:
            day, _, clock = value.partition(sep)
            if len(day) == 10 and day[4] == "-":
                return day, clock.split("+")[0].rstrip("Z")
    return None, value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "open", "available")
    return bool(value)


def _count(value: Any) -> int:
    if isinstance(value, list):
        return len(value)
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def unwrap_data(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def parse_slot(raw: Dict[str, Any]) -> AvailableSlot:
    return AvailableSlot(
        slot_id=int(raw.get("slot_id", raw.get("id"))),
        date=str(raw.get("date", "")),
        start_time=str(raw.get("start_time", "")),
        end_time=str(raw.get("end_time", "")),
        is_open=_as_bool(raw.get("status", raw.get("is_open", True))),
    )


def parse_slots(payload: Any) -> List[AvailableSlot]:
    slots: List[AvailableSlot] = []
    for raw in unwrap_data(payload) or []:
        try:
            slots.append(parse_slot(raw))
        except (TypeError, ValueError) as exc:
            logger.warning(f"Skipping malformed slot {raw!r}: {exc}")
    return slots


def parse_meeting(raw: Dict[str, Any]) -> Meeting:
    start_raw = str(raw.get("start_time") or raw.get("start") or "")
    end_raw = str(raw.get("end_time") or raw.get("end") or "")
    start_day, start_clock = _split_datetime(start_raw)
    _, end_clock = _split_datetime(end_raw)
    date = raw.get("date") or start_day or ""

    attendees = raw.get("attendee_count")
    if attendees is None:
        attendees = raw.get("attendees", raw.get("employees", 0))

    return Meeting(
        id=raw.get("id", ""),
        title=str(raw.get("meeting_name") or raw.get("title") or ""),
        project=str(raw.get("project_name") or raw.get("project") or ""),
        status=parse_status(raw.get("status")),
        date=str(date),
        start_time=start_clock,
        end_time=end_clock,
        description=raw.get("description"),
        note=raw.get("notes") if isinstance(raw.get("notes"), str) else raw.get("note"),
        attendee_count=_count(attendees),
        attachment_name=raw.get("attachment") or raw.get("attachment_name"),
        can_add_notes=_as_bool(raw.get("can_add_notes", False)),
        has_notes=_as_bool(raw.get("has_notes", False)),
        project_id=_optional_int(raw.get("project_id")),
    )


def parse_meetings(payload: Any) -> List[Meeting]:
    meetings: List[Meeting] = []
    for raw in unwrap_data(payload) or []:
        try:
            meetings.append(parse_meeting(raw))
        except (TypeError, ValueError) as exc:
            logger.warning(f"Skipping malformed meeting {raw.get('id')!r}: {exc}")
    return meetings


def _parse_attendees(raw_list: Any) -> List[Attendee]:
    attendees: List[Attendee] = []
    for a in raw_list or []:
        if isinstance(a, str):
            attendees.append(Attendee(name=a))
            continue
        attendees.append(
            Attendee(
                id=a.get("id"),
                name=a.get("name", ""),
                avatar=a.get("image") or a.get("avatar"),
            )
        )
    return attendees


def _parse_action_log(raw_list: Any) -> List[ActionLogEntry]:
    entries: List[ActionLogEntry] = []
    for item in raw_list or []:
        entries.append(
            ActionLogEntry(
                date=str(item.get("date", "")),
                action=str(item.get("action", "")),
                by=item.get("by") or item.get("created_by"),
                details=item.get("details"),
            )
        )
    return entries


def parse_summary(meeting_id: Any, payload: Any) -> MeetingSummary:
    data = unwrap_data(payload) or {}
    times = data.get("time") or {}
    notes = data.get("notes") or []
    if isinstance(notes, str):
        notes = [line for line in notes.splitlines() if line.strip()]
    return MeetingSummary(
        meeting_id=data.get("id", meeting_id),
        title=data.get("meeting_name"),
        project=data.get("project_name"),
        date=data.get("date"),
        start_time=times.get("start") if isinstance(times, dict) else None,
        end_time=times.get("end") if isinstance(times, dict) else None,
        duration_minutes=data.get("duration_minutes"),
        platform=data.get("meeting_platform"),
        attendees=_parse_attendees(data.get("employees") or data.get("attendees")),
        notes=[str(n) for n in notes],
        action_log=_parse_action_log(data.get("action_log")),
    )


def parse_join_url(payload: Any) -> Optional[str]:
    data = unwrap_data(payload)
    if isinstance(data, dict):
        return data.get("jitsi_url") or None
    return None


def parse_created(payload: Any) -> CreatedRecord:
    data = unwrap_data(payload)
    message = payload.get("message") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        return CreatedRecord(message=message)
    return CreatedRecord(id=data.get("id"), name=data.get("name") or data.get("meeting_name"), message=message)


def parse_categories(payload: Any) -> List[Category]:
    data = unwrap_data(payload)
    # Paginated: {"data": {"data": [...], "total": ...}}
    if isinstance(data, dict):
        data = data.get("data", [])
    return [Category(id=int(c["id"]), name=str(c.get("name", ""))) for c in data or []]


def parse_projects(payload: Any) -> List[Project]:
    data = unwrap_data(payload)
    if isinstance(data, dict):
        data = data.get("projects", [])
    projects: List[Project] = []
    for p in data or []:
        projects.append(
            Project(
                id=int(p["id"]),
                name=str(p.get("name", "")),
                category_id=p.get("category_id"),
            )
        )
    return projects


def parse_project_tasks(payload: Any) -> List[Task]:
    data = unwrap_data(payload) or {}
    project = data.get("project", data) if isinstance(data, dict) else {}
    tasks: List[Task] = []
    for milestone in project.get("milestones", []) or []:
        for t in milestone.get("tasks", []) or []:
            tasks.append(Task(id=t["id"], title=str(t.get("title", "")), status=t.get("status")))
    return tasks
