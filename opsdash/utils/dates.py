from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo


ZERO_DATE = "0000-00-00"
CANONICAL_FORMAT = "%Y-%m-%d"

_TIME_FORMATS = ("%H:%M:%S", "%H:%M")

# Human formats the backend has been seen to send besides ISO
_FALLBACK_FORMATS = ("%d %b %Y", "%d %B %Y", "%b %d, %Y", "%Y/%m/%d")


def today_in(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def _parse_date(raw: str) -> Optional[date]:
    text = raw.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def is_valid_date(raw: Optional[str]) -> bool:
    """True when raw is a usable calendar date (not empty, not the zero sentinel, year after 1900)."""
    if not raw or not raw.strip() or raw.strip().startswith(ZERO_DATE):
        return False
    parsed = _parse_date(raw)
    return parsed is not None and parsed.year > 1900


def normalize_date(raw: Optional[str], today: Optional[date] = None) -> str:
    """
    Return a canonical YYYY-MM-DD key for raw.

    Missing, zero-sentinel or unparseable dates fall back to today so that a
    meeting always lands on some calendar day.
    """
    if not is_valid_date(raw):
        return (today or date.today()).strftime(CANONICAL_FORMAT)
    parsed = _parse_date(raw)  # type: ignore[arg-type]
    return parsed.strftime(CANONICAL_FORMAT)  # type: ignore[union-attr]


def normalize_time(value: str) -> str:
    """Format H:MM, HH:MM or HH:MM:SS as zero-padded HH:MM; other shapes pass through."""
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).strftime("%H:%M")
        except ValueError:
            continue
    return value


def short_time(value: Optional[str]) -> str:
    return value[:5] if value else "00:00"


def display_date(iso_date: str) -> str:
    """'2025-12-05' -> '05 Dec 2025'; unparseable input is returned unchanged."""
    parsed = _parse_date(iso_date) if iso_date else None
    if parsed is None:
        return iso_date
    return parsed.strftime("%d %b %Y")


def long_date_label(iso_date: str) -> str:
    """'2025-12-05' -> 'Friday, December 5, 2025'."""
    parsed = _parse_date(iso_date) if iso_date else None
    if parsed is None:
        return iso_date
    return f"{parsed.strftime('%A')}, {parsed.strftime('%B')} {parsed.day}, {parsed.year}"
