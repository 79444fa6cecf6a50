from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse

from opsdash.calendar.grid import group_by_day, month_grid, open_day, shift_month
from opsdash.rendering.calendar_renderer import (
    render_calendar_html,
    render_meetings_html,
    render_summary_html,
)
from opsdash.rendering.composer import compose_day_model, compose_meetings_model, compose_summary_model
from opsdash.rendering.plaintext import render_calendar_plaintext, render_meetings_plaintext
from opsdash.routes.common import action_response, require_api_key_if_configured
from opsdash.scheduling.errors import ValidationError
from opsdash.scheduling.listing import STATUS_FILTERS, filter_meetings, parse_status_filter
from opsdash.scheduling.notifications import ActionResult, run_action
from opsdash.scheduling.session import SchedulingSession, get_session
from opsdash.schemas.meetings import NotesRequest, RescheduleRequest
from opsdash.utils.dates import is_valid_date, today_in

router = APIRouter()

Format = Literal["json", "html", "text"]


async def _load_meetings(session: SchedulingSession, refresh: bool = False) -> Optional[ActionResult]:
    """Fetch the meeting list if needed; returns the failed outcome, if any."""
    if refresh or not session.manager.meetings_loaded:
        outcome = await run_action("refresh_meetings", session.manager.refresh_meetings(), "Meetings updated")
        if not outcome.ok:
            return outcome
    return None


@router.get("")
async def list_meetings(
    request: Request,
    q: Optional[str] = None,
    status: Optional[str] = None,
    format: Format = "json",
    refresh: bool = False,
):
    require_api_key_if_configured(request)
    try:
        status_filter = parse_status_filter(status)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    session = get_session()
    failed = await _load_meetings(session, refresh)
    if failed is not None:
        return action_response(failed)

    meetings = filter_meetings(session.manager.meetings, q, status_filter)
    context = compose_meetings_model(meetings, query=q, status_filter=status_filter.value if status_filter else None)

    if format == "html":
        context["status_options"] = STATUS_FILTERS
        return HTMLResponse(content=render_meetings_html({**context, "request": request}))
    if format == "text":
        return PlainTextResponse(content=render_meetings_plaintext(context))
    return JSONResponse(status_code=200, content=context)


@router.get("/calendar")
async def get_calendar(
    request: Request,
    year: Optional[int] = Query(None, ge=1901, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    format: Format = "json",
    refresh: bool = False,
):
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session, refresh)
    if failed is not None:
        return action_response(failed)

    today = today_in(session.config.timezone)
    year = year or today.year
    month = month or today.month
    buckets = group_by_day(session.manager.meetings, today=today)
    grid = month_grid(year, month, buckets, today=today)
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)

    if format == "html":
        return HTMLResponse(
            content=render_calendar_html(
                {
                    "request": request,
                    "grid": grid,
                    "prev_year": prev_year,
                    "prev_month": prev_month,
                    "next_year": next_year,
                    "next_month": next_month,
                }
            )
        )
    if format == "text":
        return PlainTextResponse(content=render_calendar_plaintext(grid))
    return JSONResponse(
        status_code=200,
        content={
            **grid.model_dump(),
            "prev": {"year": prev_year, "month": prev_month},
            "next": {"year": next_year, "month": next_month},
        },
    )


@router.get("/calendar/day/{day}")
async def get_calendar_day(request: Request, day: str, format: Format = "json"):
    """Open a day's overflow list. Days with one meeting or none open nothing."""
    require_api_key_if_configured(request)
    if not is_valid_date(day):
        raise HTTPException(status_code=422, detail=f"Invalid date: '{day}'. Expected format: YYYY-MM-DD")

    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)

    today = today_in(session.config.timezone)
    buckets = group_by_day(session.manager.meetings, today=today)
    meetings = open_day(buckets, day)
    if meetings is None:
        return JSONResponse(status_code=200, content={"date": day, "opened": False, "meetings": []})

    session.modal.open_day(day, meetings)
    context = compose_day_model(day, meetings)
    if format == "html":
        return HTMLResponse(
            content=render_meetings_html({**context, "request": request, "heading": context["date_label"]})
        )
    return JSONResponse(status_code=200, content={**context, "opened": True})


@router.post("/{meeting_id}/reschedule")
async def reschedule_meeting(request: Request, meeting_id: str, body: RescheduleRequest):
    """
    Reschedule into body.slot_id, or into the booking selector's slot when
    slot_id is omitted.
    """
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)
    manager = session.manager

    async def reschedule():
        if body.slot_id is None:
            return await manager.reschedule(
                meeting_id,
                None,
                body.meeting_name,
                description=body.description,
                status=body.status,
                jitsi_url=body.jitsi_url,
                project_id=body.project_id,
                selector=session.selector,
            )
        if not manager.availability_loaded:
            await manager.refresh_availability()
        slot = manager.index.find(body.slot_id)
        if slot is None:
            manager.require_meeting(meeting_id)
            raise ValidationError("slot", "The selected slot is no longer available.")
        return await manager.reschedule(
            meeting_id,
            slot,
            body.meeting_name,
            description=body.description,
            status=body.status,
            jitsi_url=body.jitsi_url,
            project_id=body.project_id,
            selector=session.selector,
        )

    outcome = await run_action("reschedule", reschedule(), "Meeting rescheduled successfully", meeting_id=meeting_id)
    if outcome.ok:
        session.modal.close()
    return action_response(outcome)


@router.post("/{meeting_id}/cancel")
async def cancel_meeting(request: Request, meeting_id: str):
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)
    outcome = await run_action(
        "cancel", session.manager.cancel(meeting_id), "Meeting canceled successfully", meeting_id=meeting_id
    )
    return action_response(outcome)


@router.delete("/{meeting_id}")
async def delete_meeting(request: Request, meeting_id: str):
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)
    outcome = await run_action(
        "delete", session.manager.delete(meeting_id), "Meeting deleted successfully", meeting_id=meeting_id
    )
    if outcome.ok and session.modal.kind == "deleteConfirm":
        session.modal.close()
    return action_response(outcome)


@router.get("/{meeting_id}/join")
async def join_meeting(request: Request, meeting_id: str, redirect: bool = False):
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)
    outcome = await run_action("join", session.manager.join(meeting_id), "Joining meeting", meeting_id=meeting_id)
    if redirect and outcome.result:
        return RedirectResponse(url=outcome.result, status_code=307)
    return action_response(outcome, data={"jitsi_url": outcome.result} if outcome.result else None)


@router.post("/{meeting_id}/notes")
async def add_meeting_notes(request: Request, meeting_id: str, body: NotesRequest):
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)
    outcome = await run_action(
        "add_notes",
        session.manager.add_notes(meeting_id, body.notes),
        "Notes saved successfully",
        meeting_id=meeting_id,
    )
    return action_response(outcome)


@router.get("/{meeting_id}/summary")
async def get_meeting_summary(request: Request, meeting_id: str, format: Format = "json"):
    require_api_key_if_configured(request)
    session = get_session()
    failed = await _load_meetings(session)
    if failed is not None:
        return action_response(failed)

    async def show():
        meeting = session.manager.require_meeting(meeting_id)
        if session.modal.open_summary(meeting):
            return await session.summary.show(meeting)
        return None

    outcome = await run_action("view_summary", show(), "Summary loaded", meeting_id=meeting_id)
    if outcome.result is None:
        return action_response(outcome)
    context = compose_summary_model(outcome.result)
    if format == "html":
        return HTMLResponse(content=render_summary_html({**context, "request": request}))
    return action_response(outcome, data=context)


@router.post("/summary/close")
async def close_summary(request: Request):
    require_api_key_if_configured(request)
    session = get_session()
    session.summary.close()
    if session.modal.kind == "summary":
        session.modal.close()
    return JSONResponse(status_code=200, content=session.summary.snapshot())
