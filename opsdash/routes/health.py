import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

router = APIRouter()

# Last scheduling action, reported by /healthz
_last_action: Optional[Dict[str, Any]] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def update_last_action(
    action: str,
    success: bool = True,
    meeting_id: Any = None,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None,
) -> None:
    """
    Record the most recent scheduling action.

    Args:
        action: The action performed (create, book, cancel, refresh_availability, ...)
        success: Whether the action succeeded
        meeting_id: Optional meeting the action targeted
        duration_ms: Optional duration in milliseconds
        error: Optional error message
    """
    global _last_action

    _last_action = {
        "time": _now_iso(),
        "action": action,
        "success": success,
    }
    if meeting_id is not None:
        _last_action["meeting_id"] = meeting_id
    if duration_ms is not None:
        _last_action["duration_ms"] = round(duration_ms, 2)
    if error is not None:
        _last_action["error"] = error


def get_last_action() -> Optional[Dict[str, Any]]:
    return _last_action


def reset_last_action() -> None:
    global _last_action
    _last_action = None


@router.get("/healthz")
async def health_check() -> JSONResponse:
    """Health check with the last scheduling action and observability status."""
    response: Dict[str, Any] = {
        "status": "ok",
        "timestamp": _now_iso(),
        "backend_driver": os.getenv("BACKEND_DRIVER", "mock").lower(),
    }

    last_action = get_last_action()
    if last_action:
        response["last_action"] = last_action

    response["observability"] = {
        "enabled": os.getenv("OBS_ENABLED", "false").lower() == "true",
        "sentry_configured": bool(os.getenv("SENTRY_DSN")),
    }

    return JSONResponse(status_code=200, content=response)


@router.get("/healthz/ready")
async def readiness_check() -> JSONResponse:
    """
    Readiness check.

    Ready once the session holds an availability fetch; until then the
    availability check is "pending" and the service reports 503.
    """
    from opsdash.scheduling.session import get_session

    session = get_session()
    checks = {
        "config": "ok",
        "availability": "ok" if session.manager.availability_loaded else "pending",
    }
    all_ready = all(value == "ok" for value in checks.values())

    response = {
        "status": "ready" if all_ready else "not_ready",
        "timestamp": _now_iso(),
        "checks": checks,
    }
    return JSONResponse(status_code=200 if all_ready else 503, content=response)


@router.get("/healthz/live")
async def liveness_check() -> JSONResponse:
    return JSONResponse(status_code=200, content={"status": "alive", "timestamp": _now_iso()})
