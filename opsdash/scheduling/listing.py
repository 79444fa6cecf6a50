from typing import Iterable, List, Optional

from opsdash.scheduling.types import Meeting, MeetingStatus


ALL_STATUSES = "All"

STATUS_FILTERS = [ALL_STATUSES] + [status.value for status in MeetingStatus]


def parse_status_filter(raw: Optional[str]) -> Optional[MeetingStatus]:
    """'All', '' or None -> no filter. Accepts enum values and labels ('Request Sent')."""
    if not raw or raw.strip().lower() == ALL_STATUSES.lower():
        return None
    key = raw.replace(" ", "").lower()
    for status in MeetingStatus:
        if status.value.lower() == key:
            return status
    raise ValueError(f"Unknown status filter: {raw}")


def filter_meetings(
    meetings: Iterable[Meeting],
    query: Optional[str] = None,
    status: Optional[MeetingStatus] = None,
) -> List[Meeting]:
    """Case-insensitive search over title and project, then an optional status filter."""
    needle = (query or "").strip().lower()
    result = []
    for meeting in meetings:
        if needle and needle not in meeting.title.lower() and needle not in meeting.project.lower():
            continue
        if status is not None and meeting.status is not status:
            continue
        result.append(meeting)
    return result
