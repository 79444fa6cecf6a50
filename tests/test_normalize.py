import logging

from opsdash.backend import normalize
from opsdash.scheduling.types import MeetingStatus


class TestStatus:
    def test_aliases(self):
        assert normalize.parse_status("request_sent") is MeetingStatus.REQUEST_SENT
        assert normalize.parse_status("Request Sent") is MeetingStatus.REQUEST_SENT
        assert normalize.parse_status("RequestSent") is MeetingStatus.REQUEST_SENT
        assert normalize.parse_status("CONFIRMED") is MeetingStatus.CONFIRMED
        assert normalize.parse_status("cancelled") is MeetingStatus.CANCELED
        assert normalize.parse_status("completed") is MeetingStatus.COMPLETED

    def test_unknown_status_is_waiting_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert normalize.parse_status("archived") is MeetingStatus.WAITING
        assert "archived" in caplog.text


class TestMeetings:
    def test_backend_field_names(self):
        meeting = normalize.parse_meeting(
            {
                "id": 3,
                "meeting_name": "Standup",
                "project_name": "FixMate Mobile App",
                "status": "confirmed",
                "date": "2025-12-05",
                "start_time": "09:00:00",
                "end_time": "09:15:00",
                "notes": "Bring the designs",
                "attendees": 5,
                "can_add_notes": 1,
                "project_id": "13",
            }
        )

        assert meeting.title == "Standup"
        assert meeting.project == "FixMate Mobile App"
        assert meeting.status is MeetingStatus.CONFIRMED
        assert meeting.note == "Bring the designs"
        assert meeting.attendee_count == 5
        assert meeting.can_add_notes is True
        assert meeting.project_id == 13

    def test_date_folded_into_start_time(self):
        meeting = normalize.parse_meeting(
            {"id": 1, "title": "Sync", "status": "waiting", "start": "2025-12-05 14:00:00", "end": "2025-12-05 14:30:00"}
        )

        assert meeting.date == "2025-12-05"
        assert meeting.start_time == "14:00:00"
        assert meeting.end_time == "14:30:00"

    def test_attendee_list_counts(self):
        meeting = normalize.parse_meeting({"id": 1, "title": "x", "status": "confirmed", "employees": [{"id": 1}, {"id": 2}]})

        assert meeting.attendee_count == 2

    def test_malformed_meeting_skipped(self):
        meetings = normalize.parse_meetings({"data": [{"id": 1, "title": "ok", "status": "confirmed"}, {"id": None}]})

        assert [m.id for m in meetings] == [1]

    def test_non_numeric_project_id_keeps_meeting(self):
        meetings = normalize.parse_meetings(
            {"data": [{"id": 7, "meeting_name": "Sync", "status": "confirmed", "project_id": "PRJ-7"}]}
        )

        assert [m.id for m in meetings] == [7]
        assert meetings[0].project_id is None


class TestCollaboratorPayloads:
    def test_slots(self):
        slots = normalize.parse_slots(
            {"data": [{"slot_id": 5, "date": "2025-12-01", "start_time": "10:00:00", "end_time": "10:30:00", "status": True}]}
        )

        assert slots[0].slot_id == 5
        assert slots[0].is_open is True

    def test_summary(self):
        summary = normalize.parse_summary(
            1,
            {
                "data": {
                    "meeting_name": "Review",
                    "time": {"start": "14:00", "end": "15:00"},
                    "notes": ["a", "b"],
                    "employees": [{"id": 1, "name": "Aml Atef", "image": None}],
                    "action_log": [{"date": "2025-11-05", "action": "Summary added", "by": "Aml Atef"}],
                }
            },
        )

        assert summary.meeting_id == 1
        assert summary.start_time == "14:00"
        assert summary.notes == ["a", "b"]
        assert summary.attendees[0].initials == "AA"
        assert summary.action_log[0].by == "Aml Atef"

    def test_join_url(self):
        assert normalize.parse_join_url({"data": {"jitsi_url": "https://meet.jit.si/x"}}) == "https://meet.jit.si/x"
        assert normalize.parse_join_url({"data": {}}) is None

    def test_paginated_categories(self):
        categories = normalize.parse_categories({"data": {"data": [{"id": 1, "name": "Development"}], "total": 1}})

        assert categories[0].name == "Development"

    def test_project_tasks_flatten_milestones(self):
        tasks = normalize.parse_project_tasks(
            {"data": {"project": {"milestones": [{"tasks": [{"id": 1, "title": "A"}]}, {"tasks": [{"id": 2, "title": "B"}]}]}}}
        )

        assert [t.title for t in tasks] == ["A", "B"]
