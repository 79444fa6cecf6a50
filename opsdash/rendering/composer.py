from typing import Any, Dict, List, Optional

from opsdash.scheduling.actions import (
    ACTION_LABELS,
    ordered_actions,
    primary_action_label,
    reschedule_mode,
)
from opsdash.scheduling.types import Meeting, MeetingStatus, MeetingSummary
from opsdash.utils.dates import display_date, long_date_label, short_time


MAX_AVATARS = 4

DETAIL_LABELS: Dict[MeetingStatus, str] = {
    MeetingStatus.COMPLETED: "Summary",
    MeetingStatus.CANCELED: "Reason",
    MeetingStatus.CONFIRMED: "Agenda",
    MeetingStatus.WAITING: "Note",
}


def truncate(text: str, max_chars: int) -> str:
    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text
    return text[: max(0, max_chars - 1)] + "…"


def compose_meeting_card(meeting: Meeting) -> Dict[str, Any]:
    """View model for one meeting card in the list or the day overflow list."""
    detail = meeting.description or meeting.note or ""
    avatars = min(meeting.attendee_count, MAX_AVATARS)
    actions = ordered_actions(meeting.status)
    return {
        "id": meeting.id,
        "title": meeting.title,
        "project": meeting.project,
        "status": meeting.status.value,
        "status_label": meeting.status.label,
        "date": meeting.date,
        "date_label": display_date(meeting.date) if meeting.date else "",
        "time_label": f"{short_time(meeting.start_time)} - {short_time(meeting.end_time)}",
        "detail_label": DETAIL_LABELS.get(meeting.status, "") if detail else "",
        "detail": truncate(detail, 160),
        "attendee_avatars": avatars,
        "attendee_overflow": meeting.attendee_count - avatars,
        "actions": [action.value for action in actions],
        "action_labels": [ACTION_LABELS[action] for action in actions],
        "reschedule_mode": reschedule_mode(meeting.status),
        "primary_action": primary_action_label(meeting.status),
        "can_add_notes": meeting.can_add_notes,
        "attachment_name": meeting.attachment_name,
    }


def compose_meetings_model(
    meetings: List[Meeting],
    query: Optional[str] = None,
    status_filter: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "query": query or "",
        "status_filter": status_filter or "All",
        "count": len(meetings),
        "meetings": [compose_meeting_card(m) for m in meetings],
    }


def compose_day_model(day: str, meetings: List[Meeting]) -> Dict[str, Any]:
    return {
        "date": day,
        "date_label": long_date_label(day),
        "meetings": [compose_meeting_card(m) for m in meetings],
    }


def compose_summary_model(summary: MeetingSummary) -> Dict[str, Any]:
    time_label = ""
    if summary.start_time or summary.end_time:
        time_label = f"{short_time(summary.start_time)} - {short_time(summary.end_time)}"
    return {
        "meeting_id": summary.meeting_id,
        "title": summary.title or "",
        "project": summary.project or "",
        "date_label": display_date(summary.date) if summary.date else "",
        "time_label": time_label,
        "duration": f"{summary.duration_minutes} min" if summary.duration_minutes else "",
        "platform": summary.platform or "",
        "attendees": [{"name": a.name, "initials": a.initials, "avatar": a.avatar} for a in summary.attendees],
        "notes": list(summary.notes),
        "action_log": [entry.model_dump() for entry in summary.action_log],
    }
