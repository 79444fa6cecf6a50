"""
Scheduling error taxonomy.

Every failure a scheduling action can produce is a SchedulingError. Callers
catch them where the user action happened and turn them into notifications.
"""
from typing import Any, Optional


GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


class SchedulingError(Exception):
    """Base class for recoverable scheduling failures."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """A required field is missing or blank; raised before any network call."""

    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class NotFoundError(SchedulingError):
    """The referenced meeting id is missing or unknown to the backend."""

    status_code = 404

    def __init__(self, message: str = "Meeting not found", meeting_id: Any = None):
        super().__init__(message)
        self.meeting_id = meeting_id


class NetworkError(SchedulingError):
    """Non-success backend response or connection failure."""

    status_code = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.backend_status = status_code
        if status_code is not None and 400 <= status_code < 500:
            self.status_code = status_code


def message_from_payload(payload: Any, fallback: str) -> str:
    """
    Pull a human-readable message out of a backend error body.

    Accepts {"message": ...}, {"detail": ...} (string or nested dict) and
    {"error": ...}; anything else yields fallback.
    """
    if not isinstance(payload, dict):
        return fallback
    message = payload.get("message")
    if isinstance(message, str) and message.strip():
        return message
    detail = payload.get("detail")
    if isinstance(detail, dict):
        nested = detail.get("message") or detail.get("detail") or detail.get("error")
        if isinstance(nested, str) and nested.strip():
            return nested
    elif isinstance(detail, str) and detail.strip():
        return detail
    error = payload.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    if isinstance(error, str) and error.strip():
        return error
    errors = payload.get("errors")
    if isinstance(errors, dict):
        for value in errors.values():
            if isinstance(value, list) and value and isinstance(value[0], str):
                return value[0]
            if isinstance(value, str):
                return value
    return fallback
