import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from opsdash.core.config import AppConfig, load_config
from opsdash.observability.logger import log_error, timing
from opsdash.routes.health import update_last_action
from opsdash.scheduling.errors import SchedulingError
from opsdash.scheduling.session import SchedulingSession, get_session

logger = logging.getLogger(__name__)

JOB_ID = "refresh_availability"


class AvailabilityRefresher:
    """
    Periodically re-fetches availability and meetings so the booking form
    never offers slots the backend has already retired.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        session_factory: Callable[[], SchedulingSession] = get_session,
    ):
        self.config = config or load_config()
        self._session_factory = session_factory
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._last_run: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def refresh_job(self) -> bool:
        """One refresh pass. Failures are logged and retried on the next tick."""
        session = self._session_factory()
        with timing(JOB_ID) as t:
            try:
                await session.manager.refresh_availability()
                await session.manager.refresh_meetings()
            except SchedulingError as e:
                self._last_error = e.message
                log_error(e, {"action": JOB_ID, "duration_ms": t.get_duration_ms()})
                update_last_action(JOB_ID, success=False, duration_ms=t.get_duration_ms(), error=e.message)
                return False

        pruned = session.manager.picker_cache.cleanup_expired()
        if pruned:
            logger.info(f"Pruned {pruned} expired picker cache entries")

        self._last_run = datetime.now(timezone.utc)
        self._last_error = None
        update_last_action(JOB_ID, success=True, duration_ms=t.get_duration_ms())
        return True

    def start(self) -> None:
        """Start the scheduler. Must be called from a running event loop."""
        if self.running:
            logger.warning("Availability refresher is already running")
            return

        self._scheduler = AsyncIOScheduler(timezone=self.config.timezone)
        self._scheduler.add_job(
            self.refresh_job,
            "interval",
            id=JOB_ID,
            minutes=self.config.slots_refresh_minutes,
            replace_existing=True,
            next_run_time=datetime.now(timezone.utc),
        )
        self._scheduler.start()
        logger.info(f"Availability refresher started, every {self.config.slots_refresh_minutes} min")

    def shutdown(self) -> None:
        if not self.running:
            return
        self._scheduler.shutdown(wait=False)  # type: ignore[union-attr]
        self._scheduler = None
        logger.info("Availability refresher stopped")

    def get_status(self) -> Dict[str, Any]:
        next_run = None
        if self.running:
            job = self._scheduler.get_job(JOB_ID)  # type: ignore[union-attr]
            if job is not None and job.next_run_time is not None:
                next_run = job.next_run_time.isoformat()
        return {
            "running": self.running,
            "enabled": self.config.run_scheduler,
            "interval_minutes": self.config.slots_refresh_minutes,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "last_error": self._last_error,
            "next_run": next_run,
        }


_refresher: Optional[AvailabilityRefresher] = None


def get_refresher() -> AvailabilityRefresher:
    global _refresher
    if _refresher is None:
        _refresher = AvailabilityRefresher()
    return _refresher


def start_refresher() -> None:
    """Start the global refresher if RUN_SCHEDULER=1."""
    refresher = get_refresher()
    if refresher.config.run_scheduler:
        refresher.start()
    else:
        logger.info("Scheduler disabled (RUN_SCHEDULER=0)")


def stop_refresher() -> None:
    global _refresher
    if _refresher is not None:
        _refresher.shutdown()
    _refresher = None
