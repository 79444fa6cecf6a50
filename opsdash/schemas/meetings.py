from typing import Any, Optional, Union

from pydantic import BaseModel

from opsdash.scheduling.notifications import Notification


class SelectDateRequest(BaseModel):
    date: str


class SelectSlotRequest(BaseModel):
    slot_id: int


class BookMeetingRequest(BaseModel):
    project_id: Optional[int] = None
    task_id: Optional[Union[int, str]] = None
    meeting_name: Optional[str] = None
    description: Optional[str] = None


class RescheduleRequest(BaseModel):
    # Omitted slot_id means "use the slot chosen in the booking selector"
    slot_id: Optional[int] = None
    meeting_name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    jitsi_url: Optional[str] = None
    project_id: Optional[int] = None


class NotesRequest(BaseModel):
    notes: Optional[str] = None


class ActionResponse(BaseModel):
    ok: bool
    notification: Notification
    data: Optional[Any] = None
    field: Optional[str] = None
