from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field


MeetingId = Union[int, str]


class MeetingStatus(str, Enum):
    REQUEST_SENT = "RequestSent"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELED = "Canceled"
    WAITING = "Waiting"

    @property
    def label(self) -> str:
        return "Request Sent" if self is MeetingStatus.REQUEST_SENT else self.value


class AvailableSlot(BaseModel):
    slot_id: int
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM or HH:MM:SS
    end_time: str
    is_open: bool = True

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.date, self.start_time, self.end_time)

    @property
    def time_range(self) -> str:
        return f"{self.start_time[:5]} - {self.end_time[:5]}"


class Meeting(BaseModel):
    id: MeetingId
    title: str
    project: str = ""
    status: MeetingStatus
    date: str = ""
    start_time: str = ""
    end_time: str = ""
    description: Optional[str] = None
    note: Optional[str] = None
    attendee_count: int = Field(default=0, ge=0)
    attachment_name: Optional[str] = None
    can_add_notes: bool = False
    has_notes: bool = False
    project_id: Optional[int] = None


class Task(BaseModel):
    id: Union[int, str]
    title: str
    status: Optional[str] = None


class Project(BaseModel):
    id: int
    name: str
    category_id: Optional[int] = None
    tasks: List[Task] = []


class Category(BaseModel):
    id: int
    name: str


class Attendee(BaseModel):
    id: Optional[Union[int, str]] = None
    name: str
    avatar: Optional[str] = None

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper()[:2]


class ActionLogEntry(BaseModel):
    date: str
    action: str
    by: Optional[str] = None
    details: Optional[str] = None


class MeetingSummary(BaseModel):
    meeting_id: MeetingId
    title: Optional[str] = None
    project: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_minutes: Optional[int] = None
    platform: Optional[str] = None
    attendees: List[Attendee] = []
    notes: List[str] = []
    action_log: List[ActionLogEntry] = []


class CreatedRecord(BaseModel):
    """Record returned by the backend after a create call."""
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    message: Optional[str] = None


class Attachment(BaseModel):
    """File uploaded alongside a create-project request."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
