"""
Status -> allowed actions lookup.

This table is the only place that decides which actions a meeting offers.
List cards, the calendar detail view, the lifecycle manager and the summary
viewer all read from it.
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional

from opsdash.scheduling.types import Meeting, MeetingStatus


class MeetingAction(str, Enum):
    RESCHEDULE = "reschedule"
    CANCEL = "cancel"
    DELETE = "delete"
    JOIN = "join"
    VIEW_SUMMARY = "view_summary"


ALLOWED_ACTIONS: Dict[MeetingStatus, FrozenSet[MeetingAction]] = {
    MeetingStatus.REQUEST_SENT: frozenset({
        MeetingAction.RESCHEDULE,
        MeetingAction.CANCEL,
        MeetingAction.JOIN,
        MeetingAction.VIEW_SUMMARY,
    }),
    MeetingStatus.CONFIRMED: frozenset({
        MeetingAction.RESCHEDULE,
        MeetingAction.CANCEL,
        MeetingAction.JOIN,
    }),
    MeetingStatus.WAITING: frozenset({
        MeetingAction.RESCHEDULE,
        MeetingAction.JOIN,
    }),
    MeetingStatus.COMPLETED: frozenset({
        MeetingAction.DELETE,
        MeetingAction.VIEW_SUMMARY,
    }),
    MeetingStatus.CANCELED: frozenset({
        MeetingAction.RESCHEDULE,
        MeetingAction.DELETE,
    }),
}

# How the reschedule action is presented for each status that offers it
RESCHEDULE_MODES: Dict[MeetingStatus, str] = {
    MeetingStatus.REQUEST_SENT: "reschedule",
    MeetingStatus.CONFIRMED: "reschedule",
    MeetingStatus.WAITING: "edit",
    MeetingStatus.CANCELED: "rebook",
}

PRIMARY_ACTION_LABELS: Dict[MeetingStatus, str] = {
    MeetingStatus.REQUEST_SENT: "Join",
    MeetingStatus.CONFIRMED: "Join Meeting",
    MeetingStatus.WAITING: "Join",
    MeetingStatus.COMPLETED: "View Summary",
    MeetingStatus.CANCELED: "Reschedule",
}

ACTION_LABELS: Dict[MeetingAction, str] = {
    MeetingAction.RESCHEDULE: "Reschedule",
    MeetingAction.CANCEL: "Cancel Meeting",
    MeetingAction.DELETE: "Delete",
    MeetingAction.JOIN: "Join",
    MeetingAction.VIEW_SUMMARY: "View Summary",
}


def allowed_actions(status: MeetingStatus) -> FrozenSet[MeetingAction]:
    return ALLOWED_ACTIONS[status]


def actions_for(meeting: Meeting) -> FrozenSet[MeetingAction]:
    return allowed_actions(meeting.status)


def is_allowed(status: MeetingStatus, action: MeetingAction) -> bool:
    return action in ALLOWED_ACTIONS[status]


def reschedule_mode(status: MeetingStatus) -> Optional[str]:
    return RESCHEDULE_MODES.get(status)


def primary_action_label(status: MeetingStatus) -> str:
    return PRIMARY_ACTION_LABELS.get(status, "View")


def ordered_actions(status: MeetingStatus) -> list[MeetingAction]:
    """Allowed actions in display order."""
    return [action for action in MeetingAction if action in ALLOWED_ACTIONS[status]]
