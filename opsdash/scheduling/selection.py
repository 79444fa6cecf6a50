"""
Two-stage date/time slot selection used by the booking and reschedule forms.

The selector only holds ephemeral form state. Picking a date always drops the
previously chosen slot, synchronously, so a slot tied to an abandoned date can
never be submitted even if a slot fetch for that date is still in flight.
"""
from enum import Enum
from typing import Any, Dict, Optional

from opsdash.scheduling.errors import ValidationError
from opsdash.scheduling.types import AvailableSlot
from opsdash.utils.dates import display_date as format_display_date


SLOT_REQUIRED_MESSAGE = "Please select a date and time slot"


class SelectionPhase(str, Enum):
    UNSELECTED = "unselected"
    DATE_CHOSEN = "date_chosen"
    SLOT_CHOSEN = "slot_chosen"


class SlotSelector:
    def __init__(self) -> None:
        self.selected_date: Optional[str] = None
        self.selected_slot: Optional[AvailableSlot] = None

    @property
    def phase(self) -> SelectionPhase:
        if self.selected_slot is not None:
            return SelectionPhase.SLOT_CHOSEN
        if self.selected_date is not None:
            return SelectionPhase.DATE_CHOSEN
        return SelectionPhase.UNSELECTED

    def pick_date(self, date: str) -> None:
        self.selected_date = date
        self.selected_slot = None

    def pick_slot(self, slot: AvailableSlot) -> None:
        if self.phase is SelectionPhase.UNSELECTED:
            raise ValidationError("slot", "Please select a date first")
        if slot.date != self.selected_date:
            raise ValidationError(
                "slot",
                f"Slot {slot.slot_id} is on {slot.date}, not the selected date {self.selected_date}",
            )
        self.selected_slot = slot

    def reset(self) -> None:
        self.selected_date = None
        self.selected_slot = None

    def require_slot(self) -> AvailableSlot:
        if self.phase is not SelectionPhase.SLOT_CHOSEN or self.selected_slot is None:
            raise ValidationError("slot", SLOT_REQUIRED_MESSAGE)
        return self.selected_slot

    @property
    def display_date(self) -> Optional[str]:
        if self.selected_slot is None:
            return None
        return format_display_date(self.selected_slot.date)

    @property
    def display_time(self) -> Optional[str]:
        if self.selected_slot is None:
            return None
        return self.selected_slot.time_range

    def snapshot(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "selected_date": self.selected_date,
            "selected_slot": self.selected_slot.model_dump() if self.selected_slot else None,
            "display_date": self.display_date,
            "display_time": self.display_time,
        }
