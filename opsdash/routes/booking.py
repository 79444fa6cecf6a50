"""
Booking form endpoints: availability, the two-stage slot selection, and the
two ways of submitting a booking (new project + meeting, or a meeting for an
existing project task).
"""
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from opsdash.routes.common import action_response, require_api_key_if_configured
from opsdash.scheduling.errors import ValidationError
from opsdash.scheduling.notifications import run_action
from opsdash.scheduling.session import get_session
from opsdash.scheduling.types import Attachment
from opsdash.schemas.meetings import BookMeetingRequest, SelectDateRequest, SelectSlotRequest

router = APIRouter()


@router.get("/availability")
async def get_availability(request: Request, date: Optional[str] = None, refresh: bool = False):
    """
    Availability index, fetched on first use or when refresh=true.

    With date, only that day's slots are returned.
    """
    require_api_key_if_configured(request)
    session = get_session()
    manager = session.manager

    if refresh or not manager.availability_loaded:
        outcome = await run_action("refresh_availability", manager.refresh_availability(), "Availability updated")
        if not outcome.ok:
            return action_response(outcome)

    index = manager.index
    if date is not None:
        slots = index.slots_for(date)
        return JSONResponse(
            status_code=200,
            content={"date": date, "slots": [s.model_dump() for s in slots]},
        )
    return JSONResponse(
        status_code=200,
        content={**index.model_dump(), "slot_count": index.slot_count},
    )


@router.get("/state")
async def get_booking_state(request: Request):
    require_api_key_if_configured(request)
    session = get_session()
    state = session.selector.snapshot()
    state["slots"] = [s.model_dump() for s in session.manager.index.slots_for(session.selector.selected_date)]
    return JSONResponse(status_code=200, content=state)


@router.post("/select-date")
async def select_date(request: Request, body: SelectDateRequest):
    require_api_key_if_configured(request)
    session = get_session()
    session.selector.pick_date(body.date)
    state = session.selector.snapshot()
    state["slots"] = [s.model_dump() for s in session.manager.index.slots_for(body.date)]
    return JSONResponse(status_code=200, content=state)


@router.post("/select-slot")
async def select_slot(request: Request, body: SelectSlotRequest):
    require_api_key_if_configured(request)
    session = get_session()

    async def pick():
        slot = session.manager.index.find(body.slot_id)
        if slot is None:
            raise ValidationError("slot", f"Slot {body.slot_id} is not available")
        session.selector.pick_slot(slot)
        return session.selector.snapshot()

    outcome = await run_action("select_slot", pick(), "Time slot selected")
    return action_response(outcome)


@router.post("/reset")
async def reset_booking(request: Request):
    require_api_key_if_configured(request)
    session = get_session()
    session.close_form()
    return JSONResponse(status_code=200, content=session.selector.snapshot())


@router.post("/projects")
async def create_project_with_meeting(
    request: Request,
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    meeting_name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    note: Optional[str] = Form(None),
    attachment: Optional[UploadFile] = File(None),
):
    """Create a project and its first meeting request in the selected slot, if any."""
    require_api_key_if_configured(request)
    session = get_session()

    upload = None
    if attachment is not None and attachment.filename:
        upload = Attachment(
            filename=attachment.filename,
            content=await attachment.read(),
            content_type=attachment.content_type or "application/octet-stream",
        )

    outcome = await run_action(
        "create",
        session.manager.create(
            project_name=name,
            category_id=category,
            meeting_name=meeting_name,
            description=description,
            note=note,
            attachment=upload,
            selector=session.selector,
        ),
        "Meeting created successfully",
    )
    if outcome.ok:
        session.modal.close()
    return action_response(outcome)


@router.post("/meetings")
async def book_meeting(request: Request, body: BookMeetingRequest):
    require_api_key_if_configured(request)
    session = get_session()
    outcome = await run_action(
        "book",
        session.manager.book(
            project_id=body.project_id,
            task_id=body.task_id,
            meeting_name=body.meeting_name,
            selector=session.selector,
            description=body.description,
        ),
        "Meeting created successfully",
    )
    if outcome.ok:
        session.modal.close()
    return action_response(outcome)


@router.get("/categories")
async def list_categories(request: Request):
    require_api_key_if_configured(request)
    session = get_session()
    outcome = await run_action("categories", session.manager.categories(), "Categories loaded")
    return action_response(outcome)


@router.get("/projects")
async def list_projects(request: Request):
    require_api_key_if_configured(request)
    session = get_session()
    outcome = await run_action("projects", session.manager.projects(), "Projects loaded")
    return action_response(outcome)


@router.get("/projects/{project_id}/tasks")
async def list_project_tasks(request: Request, project_id: int):
    require_api_key_if_configured(request)
    session = get_session()
    outcome = await run_action("project_tasks", session.manager.project_tasks(project_id), "Tasks loaded")
    return action_response(outcome)
