import logging
from typing import Optional

from opsdash.backend.provider import SchedulingBackend, select_backend
from opsdash.core.config import AppConfig, load_config
from opsdash.scheduling.lifecycle import MeetingLifecycleManager
from opsdash.scheduling.modal import ModalController
from opsdash.scheduling.selection import SlotSelector
from opsdash.scheduling.summary import SummaryViewer
from opsdash.utils.cache import TTLCache

logger = logging.getLogger(__name__)


class SchedulingSession:
    """Everything one operator dashboard holds: lists, the open form's selection, the modal, the summary."""

    def __init__(self, backend: SchedulingBackend, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self.backend = backend
        self.manager = MeetingLifecycleManager(
            backend,
            picker_cache=TTLCache(default_ttl_seconds=self.config.picker_cache_ttl_seconds),
        )
        self.selector = SlotSelector()
        self.modal = ModalController()
        self.summary = SummaryViewer(backend)

    async def ensure_loaded(self) -> None:
        if not self.manager.availability_loaded:
            await self.manager.refresh_availability()
        if not self.manager.meetings_loaded:
            await self.manager.refresh_meetings()

    def close_form(self) -> None:
        """Close whatever modal is open and drop the ephemeral form and summary state."""
        self.modal.close()
        self.selector.reset()
        self.summary.close()

    async def aclose(self) -> None:
        await self.backend.aclose()


_session: Optional[SchedulingSession] = None


def get_session() -> SchedulingSession:
    global _session
    if _session is None:
        config = load_config()
        _session = SchedulingSession(select_backend(config), config)
        logger.info(f"Scheduling session created with backend driver '{config.backend_driver}'")
    return _session


def set_session(session: Optional[SchedulingSession]) -> None:
    global _session
    _session = session
