"""
Month calendar grid over the meeting list.

All functions here are pure: the grid is recomputed from the meeting list on
every render and holds no state of its own.
"""
import calendar
from datetime import date
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from opsdash.scheduling.types import Meeting
from opsdash.utils.dates import normalize_date, short_time


DayBuckets = Dict[str, List[Meeting]]


class CalendarCell(BaseModel):
    date: str
    day: int
    label: Optional[str] = None
    meeting_id: Optional[str] = None
    status: Optional[str] = None
    overflow: int = 0
    badge: Optional[str] = None
    is_today: bool = False

    @property
    def clickable(self) -> bool:
        return self.overflow > 0


class MonthGrid(BaseModel):
    year: int
    month: int
    title: str
    weekdays: List[str]
    weeks: List[List[Optional[CalendarCell]]]


WEEKDAY_HEADERS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def group_by_day(meetings: Iterable[Meeting], today: Optional[date] = None) -> DayBuckets:
    """Bucket meetings by normalized day; bucket order follows input order."""
    buckets: DayBuckets = {}
    for meeting in meetings:
        key = normalize_date(meeting.date, today=today)
        buckets.setdefault(key, []).append(meeting)
    return buckets


def meeting_label(meeting: Meeting) -> str:
    return f"{meeting.title} {short_time(meeting.start_time)}-{short_time(meeting.end_time)}"


def build_cell(day: date, bucket: Optional[List[Meeting]], today: Optional[date] = None) -> CalendarCell:
    """Cell for one day: the first meeting only, plus an overflow count for the rest."""
    cell = CalendarCell(date=day.isoformat(), day=day.day, is_today=today is not None and day == today)
    if not bucket:
        return cell
    first = bucket[0]
    cell.label = meeting_label(first)
    cell.meeting_id = str(first.id)
    cell.status = first.status.value
    cell.overflow = len(bucket) - 1
    if len(bucket) > 1:
        cell.badge = f"+{cell.overflow} more"
    return cell


def month_grid(year: int, month: int, buckets: DayBuckets, today: Optional[date] = None) -> MonthGrid:
    """Monday-first weeks for the month; days outside it are None."""
    weeks: List[List[Optional[CalendarCell]]] = []
    for week in calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month):
        row: List[Optional[CalendarCell]] = []
        for day in week:
            if day.month != month:
                row.append(None)
            else:
                row.append(build_cell(day, buckets.get(day.isoformat()), today=today))
        weeks.append(row)
    return MonthGrid(
        year=year,
        month=month,
        title=f"{calendar.month_name[month]} {year}",
        weekdays=WEEKDAY_HEADERS,
        weeks=weeks,
    )


def open_day(buckets: DayBuckets, day: str) -> Optional[List[Meeting]]:
    """All meetings of day, only when the cell overflows; a single meeting opens nothing."""
    bucket = buckets.get(day) or []
    if len(bucket) > 1:
        return list(bucket)
    return None


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
