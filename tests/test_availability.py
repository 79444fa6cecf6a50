from opsdash.scheduling.availability import AvailabilityIndex, index_slots


class TestIndexSlots:
    """Availability index over one slot fetch."""

    def test_two_slot_scenario(self, make_slot):
        s1 = make_slot(1, "2025-12-02", "10:00", "10:30")
        s2 = make_slot(2, "2025-12-01", "09:00", "09:30")

        index = index_slots([s1, s2])

        assert index.unique_dates == ["2025-12-01", "2025-12-02"]
        assert index.slots_by_date == {"2025-12-01": [s2], "2025-12-02": [s1]}

    def test_every_slot_in_exactly_its_date_bucket(self, make_slot):
        slots = [
            make_slot(1, "2025-12-03"),
            make_slot(2, "2025-12-01"),
            make_slot(3, "2025-12-03", "10:00", "10:30"),
            make_slot(4, "2025-12-02"),
        ]

        index = index_slots(slots)

        assert set(index.unique_dates) == {s.date for s in slots}
        assert index.slot_count == len(slots)
        for slot in slots:
            holders = [d for d in index.unique_dates if slot in index.slots_by_date[d]]
            assert holders == [slot.date]

    def test_received_order_kept_within_date(self, make_slot):
        late = make_slot(1, "2025-12-03", "16:00", "16:30")
        early = make_slot(2, "2025-12-03", "09:00", "09:30")

        index = index_slots([late, early])

        assert index.slots_for("2025-12-03") == [late, early]

    def test_duplicates_are_kept(self, make_slot):
        a = make_slot(1, "2025-12-01")
        b = make_slot(2, "2025-12-01")

        index = index_slots([a, b])

        assert index.slot_count == 2

    def test_empty_input(self):
        index = index_slots([])

        assert index.unique_dates == []
        assert index.slots_by_date == {}
        assert index.is_empty

    def test_lookups(self, make_slot):
        slot = make_slot(7, "2025-12-01")
        index = index_slots([slot])

        assert index.find(7) == slot
        assert index.find(8) is None
        assert index.slots_for("2025-12-09") == []
        assert index.slots_for(None) == []

    def test_slots_for_returns_a_copy(self, make_slot):
        index = index_slots([make_slot(1, "2025-12-01")])

        index.slots_for("2025-12-01").clear()

        assert index.slot_count == 1

    def test_default_index_is_empty(self):
        assert AvailabilityIndex().is_empty
