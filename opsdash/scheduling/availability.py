from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from opsdash.scheduling.types import AvailableSlot


class AvailabilityIndex(BaseModel):
    """Sorted unique dates plus a date -> slots lookup over one slot fetch."""

    unique_dates: List[str] = []
    slots_by_date: Dict[str, List[AvailableSlot]] = {}

    def slots_for(self, date: Optional[str]) -> List[AvailableSlot]:
        if not date:
            return []
        return list(self.slots_by_date.get(date, []))

    def find(self, slot_id: int) -> Optional[AvailableSlot]:
        for date in self.unique_dates:
            for slot in self.slots_by_date[date]:
                if slot.slot_id == slot_id:
                    return slot
        return None

    @property
    def slot_count(self) -> int:
        return sum(len(slots) for slots in self.slots_by_date.values())

    @property
    def is_empty(self) -> bool:
        return not self.unique_dates


def index_slots(slots: Iterable[AvailableSlot]) -> AvailabilityIndex:
    """
    Build an AvailabilityIndex from a raw slot list.

    Dates are ISO YYYY-MM-DD so a lexical sort is chronological. Slots keep
    the order they were received in within each date.
    """
    slots_by_date: Dict[str, List[AvailableSlot]] = {}
    for slot in slots:
        slots_by_date.setdefault(slot.date, []).append(slot)
    unique_dates = sorted(slots_by_date)
    return AvailabilityIndex(
        unique_dates=unique_dates,
        slots_by_date={d: slots_by_date[d] for d in unique_dates},
    )
