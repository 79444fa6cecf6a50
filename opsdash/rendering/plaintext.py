from typing import Any, Dict, List

from opsdash.calendar.grid import MonthGrid
from opsdash.scheduling.availability import AvailabilityIndex
from opsdash.utils.dates import display_date

CELL_WIDTH = 24


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 1] + "…"
    return text.ljust(width)


def render_calendar_plaintext(grid: MonthGrid) -> str:
    """
    Render a month grid as fixed-width text.

    Each day takes two lines: the day number with its overflow badge, then
    the first meeting's label.
    """
    lines = [grid.title, "=" * len(grid.title), ""]
    lines.append(" | ".join(_fit(name, CELL_WIDTH) for name in grid.weekdays))
    lines.append("-+-".join("-" * CELL_WIDTH for _ in grid.weekdays))

    for week in grid.weeks:
        top: List[str] = []
        bottom: List[str] = []
        for cell in week:
            if cell is None:
                top.append(" " * CELL_WIDTH)
                bottom.append(" " * CELL_WIDTH)
                continue
            head = f"{cell.day:>2}"
            if cell.badge:
                head += f" ({cell.badge})"
            top.append(_fit(head, CELL_WIDTH))
            bottom.append(_fit(cell.label or "", CELL_WIDTH))
        lines.append(" | ".join(top).rstrip())
        lines.append(" | ".join(bottom).rstrip())

    return "\n".join(lines)


def render_meetings_plaintext(context: Dict[str, Any]) -> str:
    meetings = context.get("meetings", [])
    if not meetings:
        return "No meetings found."

    lines = []
    for card in meetings:
        lines.append(f"[{card['status_label']}] {card['title']} ({card['project']})")
        lines.append(f"    {card['date_label']} {card['time_label']}".rstrip())
        if card.get("detail"):
            lines.append(f"    {card['detail_label']}: {card['detail']}")
        lines.append(f"    Actions: {', '.join(card['action_labels']) or 'none'}")
    return "\n".join(lines)


def render_availability_plaintext(index: AvailabilityIndex) -> str:
    if index.is_empty:
        return "No available slots."

    lines = []
    for day in index.unique_dates:
        lines.append(display_date(day))
        for slot in index.slots_for(day):
            lines.append(f"  #{slot.slot_id}  {slot.time_range}")
    return "\n".join(lines)
