import pytest

from opsdash.scheduling.actions import (
    ALLOWED_ACTIONS,
    MeetingAction,
    actions_for,
    ordered_actions,
    primary_action_label,
    reschedule_mode,
)
from opsdash.scheduling.types import MeetingStatus

A = MeetingAction


class TestAllowedActions:
    """Status to action lookup."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (MeetingStatus.REQUEST_SENT, {A.RESCHEDULE, A.CANCEL, A.JOIN, A.VIEW_SUMMARY}),
            (MeetingStatus.CONFIRMED, {A.RESCHEDULE, A.CANCEL, A.JOIN}),
            (MeetingStatus.WAITING, {A.RESCHEDULE, A.JOIN}),
            (MeetingStatus.COMPLETED, {A.DELETE, A.VIEW_SUMMARY}),
            (MeetingStatus.CANCELED, {A.RESCHEDULE, A.DELETE}),
        ],
    )
    def test_matrix(self, status, expected):
        assert ALLOWED_ACTIONS[status] == expected

    def test_every_status_has_a_row(self):
        assert set(ALLOWED_ACTIONS) == set(MeetingStatus)

    def test_confirmed_meeting_scenario(self, make_meeting):
        meeting = make_meeting(status=MeetingStatus.CONFIRMED)

        assert actions_for(meeting) == {A.RESCHEDULE, A.CANCEL, A.JOIN}

    def test_depends_on_status_only(self, make_meeting):
        plain = make_meeting(id=1, status=MeetingStatus.COMPLETED)
        decorated = make_meeting(
            id=99,
            title="Other",
            status=MeetingStatus.COMPLETED,
            date="0000-00-00",
            attendee_count=7,
            can_add_notes=True,
            has_notes=True,
            attachment_name="notes.pdf",
        )

        assert actions_for(plain) == actions_for(decorated)

    def test_reschedule_modes(self):
        assert reschedule_mode(MeetingStatus.CONFIRMED) == "reschedule"
        assert reschedule_mode(MeetingStatus.WAITING) == "edit"
        assert reschedule_mode(MeetingStatus.CANCELED) == "rebook"
        assert reschedule_mode(MeetingStatus.COMPLETED) is None

    def test_primary_labels(self):
        assert primary_action_label(MeetingStatus.COMPLETED) == "View Summary"
        assert primary_action_label(MeetingStatus.CONFIRMED) == "Join Meeting"
        assert primary_action_label(MeetingStatus.CANCELED) == "Reschedule"
        assert primary_action_label(MeetingStatus.WAITING) == "Join"

    def test_ordered_actions_follow_enum_order(self):
        assert ordered_actions(MeetingStatus.REQUEST_SENT) == [A.RESCHEDULE, A.CANCEL, A.JOIN, A.VIEW_SUMMARY]
