import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from opsdash.backend import normalize
from opsdash.backend.provider import MeetingId
from opsdash.scheduling.errors import NetworkError, NotFoundError
from opsdash.scheduling.types import (
    Attachment,
    AvailableSlot,
    Category,
    CreatedRecord,
    Meeting,
    MeetingSummary,
    Project,
    Task,
)

logger = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_backend.json"

JOIN_URL_TEMPLATE = "https://meet.jit.si/opsdash-meeting-{meeting_id}"


class MockBackend:
    """
    In-memory backend seeded from sample data.

    Behaves like the real backend for the scheduling core: booking a slot
    retires it from later availability reads, cancel/delete/reschedule mutate
    the stored meetings, unknown ids are 404s.
    """

    def __init__(self, data_path: Optional[Path] = None, seed: Optional[Dict[str, Any]] = None) -> None:
        self._path = data_path or DATA_PATH
        if seed is None:
            seed = json.loads(self._path.read_text(encoding="utf-8")) if self._path.exists() else {}
        self._state: Dict[str, Any] = copy.deepcopy(seed)
        self._state.setdefault("available_slots", [])
        self._state.setdefault("meetings", [])
        self._state.setdefault("summaries", {})
        self._state.setdefault("categories", [])
        self._state.setdefault("projects", [])
        self._state.setdefault("project_tasks", {})
        self._next_id = max([int(m["id"]) for m in self._state["meetings"]] + [0]) + 1
        self.calls: List[str] = []

    def _find_raw(self, meeting_id: MeetingId) -> Dict[str, Any]:
        for raw in self._state["meetings"]:
            if str(raw["id"]) == str(meeting_id):
                return raw
        raise NotFoundError(f"Meeting {meeting_id} not found", meeting_id=meeting_id)

    def _claim_slot(self, slot_id: Any) -> Dict[str, Any]:
        for raw in self._state["available_slots"]:
            if str(raw["slot_id"]) == str(slot_id):
                self._state["available_slots"].remove(raw)
                return raw
        raise NetworkError("The selected slot is no longer available.", status_code=409)

    async def fetch_available_slots(self) -> List[AvailableSlot]:
        self.calls.append("fetch_available_slots")
        return normalize.parse_slots({"data": copy.deepcopy(self._state["available_slots"])})

    async def fetch_meetings(self) -> List[Meeting]:
        self.calls.append("fetch_meetings")
        return normalize.parse_meetings({"data": copy.deepcopy(self._state["meetings"])})

    async def fetch_meeting_summary(self, meeting_id: MeetingId) -> MeetingSummary:
        self.calls.append("fetch_meeting_summary")
        raw = self._find_raw(meeting_id)
        summary = self._state["summaries"].get(str(meeting_id))
        if summary is None:
            summary = {
                "id": raw["id"],
                "meeting_name": raw.get("meeting_name"),
                "project_name": raw.get("project_name"),
                "date": raw.get("date"),
                "time": {"start": raw.get("start_time"), "end": raw.get("end_time")},
                "notes": [],
                "employees": [],
                "action_log": [{"date": raw.get("date", ""), "action": "Meeting created"}],
            }
        return normalize.parse_summary(meeting_id, {"data": copy.deepcopy(summary)})

    async def create_project(
        self, fields: Dict[str, str], attachment: Optional[Attachment] = None
    ) -> CreatedRecord:
        self.calls.append("create_project")
        project_id = max([int(p["id"]) for p in self._state["projects"]] + [0]) + 1
        project = {"id": project_id, "name": fields["name"], "category_id": int(fields["category"])}
        self._state["projects"].append(project)

        slot = self._claim_slot(fields["slot_id"]) if fields.get("slot_id") else None
        meeting = {
            "id": self._next_id,
            "meeting_name": fields["meeting_name"],
            "project_name": fields["name"],
            "project_id": project_id,
            "status": "request_sent",
            "date": slot["date"] if slot else "",
            "start_time": fields.get("start_time", ""),
            "end_time": fields.get("end_time", ""),
            "description": fields.get("description"),
            "notes": fields.get("note"),
            "attendees": 0,
            "attachment": attachment.filename if attachment else None,
            "can_add_notes": False,
            "has_notes": bool(fields.get("note")),
        }
        self._next_id += 1
        self._state["meetings"].append(meeting)
        return CreatedRecord(id=project_id, name=fields["name"], message="Project created successfully")

    async def create_meeting(self, payload: Dict[str, Any]) -> CreatedRecord:
        self.calls.append("create_meeting")
        project = next(
            (p for p in self._state["projects"] if str(p["id"]) == str(payload["project_id"])), None
        )
        if project is None:
            raise NotFoundError(f"Project {payload['project_id']} not found")
        slot = self._claim_slot(payload["slot_id"])
        meeting = {
            "id": self._next_id,
            "meeting_name": payload["meeting_name"],
            "project_name": project["name"],
            "project_id": project["id"],
            "status": payload.get("status") or "request_sent",
            "date": slot["date"],
            "start_time": payload["start_time"],
            "end_time": payload["end_time"],
            "description": payload.get("description"),
            "notes": None,
            "attendees": 0,
            "can_add_notes": False,
            "has_notes": False,
        }
        self._next_id += 1
        self._state["meetings"].append(meeting)
        return CreatedRecord(id=meeting["id"], name=meeting["meeting_name"], message="Meeting created successfully")

    async def reschedule_meeting(self, meeting_id: MeetingId, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append("reschedule_meeting")
        raw = self._find_raw(meeting_id)
        slot = self._claim_slot(payload["slot_id"])
        raw.update(
            {
                "meeting_name": payload["meeting_name"],
                "description": payload.get("description"),
                "date": slot["date"],
                "start_time": payload["start_time"],
                "end_time": payload["end_time"],
                "project_id": payload["project_id"],
            }
        )
        if payload.get("status"):
            raw["status"] = payload["status"]
        return {"status": True, "message": "Meeting rescheduled successfully", "data": copy.deepcopy(raw)}

    async def cancel_meeting(self, meeting_id: MeetingId) -> Dict[str, Any]:
        self.calls.append("cancel_meeting")
        raw = self._find_raw(meeting_id)
        raw["status"] = "canceled"
        return {"status": True, "message": "Meeting canceled successfully", "data": copy.deepcopy(raw)}

    async def delete_meeting(self, meeting_id: MeetingId) -> Dict[str, Any]:
        self.calls.append("delete_meeting")
        raw = self._find_raw(meeting_id)
        self._state["meetings"].remove(raw)
        return {"status": True, "message": "Meeting deleted successfully"}

    async def join_meeting(self, meeting_id: MeetingId) -> str:
        self.calls.append("join_meeting")
        self._find_raw(meeting_id)
        return JOIN_URL_TEMPLATE.format(meeting_id=meeting_id)

    async def add_meeting_notes(self, meeting_id: MeetingId, notes: str) -> Dict[str, Any]:
        self.calls.append("add_meeting_notes")
        raw = self._find_raw(meeting_id)
        raw["notes"] = notes
        raw["has_notes"] = True
        summary = self._state["summaries"].get(str(meeting_id))
        if summary is not None:
            summary.setdefault("notes", []).append(notes)
        return {"status": True, "message": "Notes added successfully"}

    async def fetch_categories(self) -> List[Category]:
        self.calls.append("fetch_categories")
        return normalize.parse_categories({"data": {"data": copy.deepcopy(self._state["categories"])}})

    async def fetch_projects(self) -> List[Project]:
        self.calls.append("fetch_projects")
        return normalize.parse_projects({"data": {"projects": copy.deepcopy(self._state["projects"])}})

    async def fetch_project_tasks(self, project_id: int) -> List[Task]:
        self.calls.append("fetch_project_tasks")
        tasks = self._state["project_tasks"].get(str(project_id), [])
        return normalize.parse_project_tasks({"data": {"project": {"milestones": [{"tasks": copy.deepcopy(tasks)}]}}})

    async def aclose(self) -> None:
        return None
