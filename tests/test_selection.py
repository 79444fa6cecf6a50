import pytest

from opsdash.scheduling.errors import ValidationError
from opsdash.scheduling.selection import SLOT_REQUIRED_MESSAGE, SelectionPhase, SlotSelector


class TestSlotSelector:
    """Two-stage date then slot selection."""

    def test_starts_unselected(self):
        selector = SlotSelector()

        assert selector.phase is SelectionPhase.UNSELECTED
        assert selector.display_date is None
        assert selector.display_time is None

    def test_date_then_slot(self, make_slot):
        selector = SlotSelector()
        slot = make_slot(1, "2025-12-01", "09:00:00", "09:30:00")

        selector.pick_date("2025-12-01")
        assert selector.phase is SelectionPhase.DATE_CHOSEN

        selector.pick_slot(slot)
        assert selector.phase is SelectionPhase.SLOT_CHOSEN
        assert selector.require_slot() == slot
        assert selector.display_date == "01 Dec 2025"
        assert selector.display_time == "09:00 - 09:30"

    def test_new_date_clears_slot(self, make_slot):
        selector = SlotSelector()
        selector.pick_date("2025-12-01")
        selector.pick_slot(make_slot(1, "2025-12-01"))

        selector.pick_date("2025-12-02")

        assert selector.selected_slot is None
        assert selector.selected_date == "2025-12-02"
        assert selector.phase is SelectionPhase.DATE_CHOSEN

    def test_same_date_again_still_clears_slot(self, make_slot):
        selector = SlotSelector()
        selector.pick_date("2025-12-01")
        selector.pick_slot(make_slot(1, "2025-12-01"))

        selector.pick_date("2025-12-01")

        assert selector.selected_slot is None

    def test_slot_from_other_date_rejected(self, make_slot):
        selector = SlotSelector()
        selector.pick_date("2025-12-01")
        kept = make_slot(1, "2025-12-01")
        selector.pick_slot(kept)

        with pytest.raises(ValidationError) as exc:
            selector.pick_slot(make_slot(2, "2025-12-02"))

        assert exc.value.field == "slot"
        assert selector.selected_slot == kept
        assert selector.selected_date == "2025-12-01"

    def test_slot_before_date_rejected(self, make_slot):
        selector = SlotSelector()

        with pytest.raises(ValidationError):
            selector.pick_slot(make_slot(1, "2025-12-01"))

        assert selector.phase is SelectionPhase.UNSELECTED

    def test_require_slot_without_slot(self):
        selector = SlotSelector()
        selector.pick_date("2025-12-01")

        with pytest.raises(ValidationError) as exc:
            selector.require_slot()

        assert exc.value.message == SLOT_REQUIRED_MESSAGE

    def test_reset(self, make_slot):
        selector = SlotSelector()
        selector.pick_date("2025-12-01")
        selector.pick_slot(make_slot(1, "2025-12-01"))

        selector.reset()

        assert selector.phase is SelectionPhase.UNSELECTED
        assert selector.snapshot()["selected_slot"] is None
