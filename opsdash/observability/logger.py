import os
import time
import json
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional
from datetime import datetime, timezone

import sentry_sdk

logger = logging.getLogger(__name__)


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration_ms = (time.time() - self.start_time) * 1000

    def get_duration_ms(self) -> Optional[float]:
        """Get duration in milliseconds."""
        if self.duration_ms is None and self.start_time is not None:
            return (time.time() - self.start_time) * 1000
        return self.duration_ms


@contextmanager
def timing(operation_name: str):
    """Context manager for timing operations."""
    context = TimingContext(operation_name)
    with context:
        yield context


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z"


def log_event(
    action: str,
    outcome: str,
    meeting_id: Any = None,
    status: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> None:
    """
    Log a structured scheduling event.

    Args:
        action: The scheduling action (e.g. 'create', 'cancel', 'refresh_availability')
        outcome: 'ok', 'failed', 'rejected' or 'skipped'
        meeting_id: Optional meeting the action targeted
        status: Optional meeting status at the time of the action
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields to include in the log
    """
    log_entry: Dict[str, Any] = {
        "timestamp": _utc_now(),
        "action": action,
        "outcome": outcome,
    }

    if meeting_id is not None:
        log_entry["meeting_id"] = meeting_id

    if status is not None:
        log_entry["status"] = status

    if duration_ms is not None:
        log_entry["duration_ms"] = round(duration_ms, 2)

    for key, value in kwargs.items():
        log_entry[key] = _sanitize_value(key, value)

    logger.info(json.dumps(log_entry, separators=(',', ':'), default=str))


_SENSITIVE_KEYS = ("password", "secret", "token", "auth", "credential", "jitsi_url")


def _sanitize_value(key: str, value: Any) -> Any:
    """
    Keep secrets and free text out of the logs.

    Keys that look like credentials are redacted; long strings (notes,
    descriptions) are truncated.
    """
    lowered = key.lower()
    if any(pattern in lowered for pattern in _SENSITIVE_KEYS):
        return "[REDACTED]"
    if isinstance(value, str) and len(value) > 100:
        return value[:97] + "..."
    return value


def init_sentry() -> bool:
    """
    Initialize Sentry if enabled and DSN is provided.

    Returns:
        True if Sentry was initialized, False otherwise
    """
    if not os.getenv("OBS_ENABLED", "false").lower() == "true":
        return False

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("Sentry DSN not provided, skipping Sentry initialization")
        return False

    try:
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR
                ),
            ],
            traces_sample_rate=0.1,
            environment=os.getenv("ENVIRONMENT", "development"),
        )

        logger.info("Sentry initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": _utc_now(),
        "level": "ERROR",
        "error": str(error),
        "error_type": type(error).__name__,
    }

    if context:
        log_entry.update({k: _sanitize_value(k, v) for k, v in context.items()})

    logger.error(json.dumps(log_entry, separators=(',', ':'), default=str))


def log_warning(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a warning with optional context.

    Args:
        message: The warning message
        context: Optional context dictionary
    """
    log_entry = {
        "timestamp": _utc_now(),
        "level": "WARNING",
        "message": message,
    }

    if context:
        log_entry.update({k: _sanitize_value(k, v) for k, v in context.items()})

    logger.warning(json.dumps(log_entry, separators=(',', ':'), default=str))
