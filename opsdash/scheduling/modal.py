"""
The dashboard's single active modal.

One tagged value replaces a set of independent open/closed flags, so two
modals can never be open at once. Opening any modal replaces the current one.
"""
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from opsdash.scheduling.actions import MeetingAction, is_allowed, reschedule_mode
from opsdash.scheduling.types import Meeting, MeetingId


class NoModal(BaseModel):
    kind: Literal["none"] = "none"


class AddMeetingModal(BaseModel):
    kind: Literal["addMeeting"] = "addMeeting"


class EditMeetingModal(BaseModel):
    kind: Literal["editMeeting"] = "editMeeting"
    meeting: Meeting
    mode: str = "reschedule"


class DeleteConfirmModal(BaseModel):
    kind: Literal["deleteConfirm"] = "deleteConfirm"
    meeting: Meeting


class SummaryModal(BaseModel):
    kind: Literal["summary"] = "summary"
    meeting_id: MeetingId


class DayMeetingsModal(BaseModel):
    kind: Literal["dayMeetings"] = "dayMeetings"
    date: str
    meetings: List[Meeting]


ActiveModal = Annotated[
    Union[NoModal, AddMeetingModal, EditMeetingModal, DeleteConfirmModal, SummaryModal, DayMeetingsModal],
    Field(discriminator="kind"),
]

_active_modal_adapter: TypeAdapter = TypeAdapter(ActiveModal)


def parse_modal(data: Dict[str, Any]) -> ActiveModal:
    return _active_modal_adapter.validate_python(data)


class ModalController:
    def __init__(self) -> None:
        self.active: ActiveModal = NoModal()

    @property
    def kind(self) -> str:
        return self.active.kind

    def open_add_meeting(self) -> ActiveModal:
        self.active = AddMeetingModal()
        return self.active

    def open_edit(self, meeting: Meeting) -> bool:
        mode = reschedule_mode(meeting.status)
        if mode is None:
            return False
        self.active = EditMeetingModal(meeting=meeting, mode=mode)
        return True

    def open_delete_confirm(self, meeting: Meeting) -> bool:
        if not is_allowed(meeting.status, MeetingAction.DELETE):
            return False
        self.active = DeleteConfirmModal(meeting=meeting)
        return True

    def open_summary(self, meeting: Meeting) -> bool:
        if not is_allowed(meeting.status, MeetingAction.VIEW_SUMMARY):
            return False
        self.active = SummaryModal(meeting_id=meeting.id)
        return True

    def open_day(self, date: str, meetings: List[Meeting]) -> ActiveModal:
        self.active = DayMeetingsModal(date=date, meetings=list(meetings))
        return self.active

    def close(self) -> None:
        self.active = NoModal()

    def snapshot(self) -> Dict[str, Any]:
        return self.active.model_dump(mode="json")
