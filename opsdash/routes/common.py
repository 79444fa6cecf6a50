from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from opsdash.core.config import load_config
from opsdash.scheduling.errors import ValidationError
from opsdash.scheduling.notifications import ActionResult
from opsdash.schemas.meetings import ActionResponse


def require_api_key_if_configured(request: Request) -> None:
    """Require API key if configured in environment."""
    cfg = load_config()
    if not cfg.api_key:
        return
    provided = request.headers.get("x-api-key") or request.headers.get("X-API-Key")
    if provided != cfg.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


def action_response(outcome: ActionResult, data: Optional[Any] = None) -> JSONResponse:
    """JSON body for a scheduling action: the notification plus optional data, with the error's status code."""
    field = outcome.error.field if isinstance(outcome.error, ValidationError) else None
    body = ActionResponse(
        ok=outcome.ok,
        notification=outcome.notification,
        data=data if data is not None else _dump(outcome.result),
        field=field,
    )
    return JSONResponse(status_code=outcome.status_code, content=body.model_dump(mode="json"))


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value
