import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from opsdash.backend import normalize
from opsdash.backend.provider import MeetingId
from opsdash.core.config import AppConfig, load_config
from opsdash.observability.logger import timing
from opsdash.scheduling.errors import (
    GENERIC_FAILURE_MESSAGE,
    NetworkError,
    NotFoundError,
    message_from_payload,
)
from opsdash.scheduling.types import (
    Attachment,
    AvailableSlot,
    Category,
    CreatedRecord,
    Meeting,
    MeetingSummary,
    Project,
    Task,
)

logger = logging.getLogger(__name__)


class HttpBackend:
    """Client for the dashboard backend's client API."""

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        api_password: Optional[str] = None,
        locale: str = "en",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.auth_token = auth_token
        self.api_password = api_password
        self.locale = locale
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Language": self.locale,
        }
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        else:
            logger.warning("No backend auth token configured")
        if self.api_password:
            headers["API-Password"] = self.api_password
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str = GENERIC_FAILURE_MESSAGE,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[List[Tuple[str, Any]]] = None,
    ) -> Any:
        client = self._get_client()
        try:
            with timing(f"{method} {path}") as t:
                response = await client.request(method, path, json=json, files=files)
            logger.debug(f"Backend {method} {path} -> {response.status_code} in {t.get_duration_ms():.0f}ms")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                payload = e.response.json()
            except ValueError:
                payload = None
            message = message_from_payload(payload, fallback)
            logger.error(f"Backend API error: {e.response.status_code} {method} {path} {message}")
            if e.response.status_code == 404:
                raise NotFoundError(message)
            raise NetworkError(message, status_code=e.response.status_code)
        except httpx.RequestError as e:
            logger.error(f"Backend API connection error: {method} {path} {e}")
            raise NetworkError(fallback)

        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError:
            raise NetworkError(fallback, status_code=response.status_code)
        # The backend reports some failures as 200 with {"status": false}
        if isinstance(payload, dict) and payload.get("status") is False:
            message = message_from_payload(payload, fallback)
            logger.error(f"Backend API rejected {method} {path}: {message}")
            raise NetworkError(message, status_code=response.status_code)
        return payload

    async def fetch_available_slots(self) -> List[AvailableSlot]:
        payload = await self._request("GET", "available-slots", fallback="Failed to load available slots.")
        return normalize.parse_slots(payload)

    async def fetch_meetings(self) -> List[Meeting]:
        payload = await self._request("GET", "meetings", fallback="Failed to load meetings.")
        return normalize.parse_meetings(payload)

    async def fetch_meeting_summary(self, meeting_id: MeetingId) -> MeetingSummary:
        payload = await self._request(
            "GET", f"meeting-summary/{meeting_id}", fallback="Failed to load meeting summary."
        )
        return normalize.parse_summary(meeting_id, payload)

    async def create_project(
        self, fields: Dict[str, str], attachment: Optional[Attachment] = None
    ) -> CreatedRecord:
        # Always multipart, text fields included as (None, value) parts
        files: List[Tuple[str, Any]] = [
            (name, (None, str(value))) for name, value in fields.items()
        ]
        if attachment is not None:
            files.append(("attachment", (attachment.filename, attachment.content, attachment.content_type)))
        payload = await self._request(
            "POST",
            "projects",
            fallback="Failed to create meeting. Please try again.",
            files=files,
        )
        return normalize.parse_created(payload)

    async def create_meeting(self, payload: Dict[str, Any]) -> CreatedRecord:
        body = await self._request(
            "POST", "meetings", fallback="Failed to create meeting. Please try again.", json=payload
        )
        return normalize.parse_created(body)

    async def reschedule_meeting(self, meeting_id: MeetingId, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PUT",
            f"meetings/{meeting_id}",
            fallback="Failed to reschedule meeting. Please try again.",
            json=payload,
        )

    async def cancel_meeting(self, meeting_id: MeetingId) -> Dict[str, Any]:
        return await self._request(
            "PATCH", f"meetings/{meeting_id}/cancel", fallback="Failed to cancel meeting. Please try again."
        )

    async def delete_meeting(self, meeting_id: MeetingId) -> Dict[str, Any]:
        return await self._request(
            "DELETE", f"meetings/{meeting_id}", fallback="Failed to delete meeting. Please try again."
        )

    async def join_meeting(self, meeting_id: MeetingId) -> str:
        payload = await self._request(
            "GET", f"meetings/{meeting_id}/join", fallback="Failed to join meeting. Please try again."
        )
        url = normalize.parse_join_url(payload)
        if not url:
            raise NetworkError("Meeting link is not available yet.")
        return url

    async def add_meeting_notes(self, meeting_id: MeetingId, notes: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"meetings/{meeting_id}/notes",
            fallback="Failed to save notes. Please try again.",
            json={"notes": notes},
        )

    async def fetch_categories(self) -> List[Category]:
        payload = await self._request("GET", "category", fallback="Failed to load categories.")
        return normalize.parse_categories(payload)

    async def fetch_projects(self) -> List[Project]:
        payload = await self._request("GET", "dashboard/projects", fallback="Failed to load projects.")
        return normalize.parse_projects(payload)

    async def fetch_project_tasks(self, project_id: int) -> List[Task]:
        payload = await self._request(
            "GET", f"project/overview/{project_id}", fallback="Failed to load project tasks."
        )
        return normalize.parse_project_tasks(payload)


def create_http_backend(config: Optional[AppConfig] = None) -> HttpBackend:
    """Factory function to create HttpBackend from configuration."""
    cfg = config or load_config()
    return HttpBackend(
        base_url=cfg.backend_api_url,
        auth_token=cfg.backend_auth_token,
        api_password=cfg.backend_api_password,
        locale=cfg.locale,
        timeout=cfg.http_timeout_seconds,
    )
