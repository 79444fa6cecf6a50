from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from opsdash.observability.logger import log_error
from opsdash.routes.common import require_api_key_if_configured
from opsdash.scheduling.errors import SchedulingError
from opsdash.scheduling.session import get_session

router = APIRouter()


def _modal_response(opened: bool = True) -> JSONResponse:
    session = get_session()
    return JSONResponse(status_code=200, content={"opened": opened, "modal": session.modal.snapshot()})


async def _meeting_or_error(meeting_id: str):
    session = get_session()
    try:
        if not session.manager.meetings_loaded:
            await session.manager.refresh_meetings()
        return session.manager.require_meeting(meeting_id)
    except SchedulingError as e:
        log_error(e, {"action": "open_modal", "meeting_id": meeting_id})
        return JSONResponse(status_code=e.status_code, content={"opened": False, "detail": e.message})


@router.get("/modal")
async def get_modal(request: Request):
    require_api_key_if_configured(request)
    return _modal_response()


@router.post("/modal/add-meeting")
async def open_add_meeting(request: Request):
    """Open the booking form; any previous selection is discarded."""
    require_api_key_if_configured(request)
    session = get_session()
    session.selector.reset()
    session.modal.open_add_meeting()
    return _modal_response()


@router.post("/modal/edit/{meeting_id}")
async def open_edit_meeting(request: Request, meeting_id: str):
    require_api_key_if_configured(request)
    session = get_session()
    meeting = await _meeting_or_error(meeting_id)
    if isinstance(meeting, JSONResponse):
        return meeting
    session.selector.reset()
    return _modal_response(session.modal.open_edit(meeting))


@router.post("/modal/delete/{meeting_id}")
async def open_delete_confirm(request: Request, meeting_id: str):
    require_api_key_if_configured(request)
    session = get_session()
    meeting = await _meeting_or_error(meeting_id)
    if isinstance(meeting, JSONResponse):
        return meeting
    return _modal_response(session.modal.open_delete_confirm(meeting))


@router.post("/modal/close")
async def close_modal(request: Request):
    require_api_key_if_configured(request)
    session = get_session()
    session.close_form()
    return _modal_response(False)
