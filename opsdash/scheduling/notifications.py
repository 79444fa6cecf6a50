"""
User-visible outcomes of scheduling actions.

run_action() is the single place where SchedulingError is caught: it awaits
the operation, logs the outcome, records it for /healthz and turns it into a
Notification. Errors are never swallowed; they come back on the result so the
caller can pick the HTTP status.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Literal, Optional

from pydantic import BaseModel

from opsdash.observability.logger import log_error, timing
from opsdash.routes.health import update_last_action
from opsdash.scheduling.errors import SchedulingError


NOT_AVAILABLE_MESSAGE = "This action is not available for this meeting."


class Notification(BaseModel):
    level: Literal["success", "error", "info"]
    message: str


@dataclass
class ActionResult:
    notification: Notification
    result: Any = None
    error: Optional[SchedulingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> int:
        return self.error.status_code if self.error is not None else 200


async def run_action(
    action: str,
    operation: Awaitable[Any],
    success_message: str,
    meeting_id: Any = None,
) -> ActionResult:
    """
    Await operation and convert its outcome into a notification.

    An operation that returns None was a no-op (the meeting's status does not
    offer the action) and yields an info notification.
    """
    with timing(action) as t:
        try:
            result = await operation
        except SchedulingError as e:
            duration = t.get_duration_ms()
            log_error(e, {"action": action, "meeting_id": meeting_id, "duration_ms": duration})
            update_last_action(action, success=False, meeting_id=meeting_id, duration_ms=duration, error=e.message)
            return ActionResult(notification=Notification(level="error", message=e.message), error=e)

    duration = t.get_duration_ms()
    if result is None:
        return ActionResult(notification=Notification(level="info", message=NOT_AVAILABLE_MESSAGE))

    update_last_action(action, success=True, meeting_id=meeting_id, duration_ms=duration)
    return ActionResult(notification=Notification(level="success", message=success_message), result=result)
