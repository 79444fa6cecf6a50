import os
from typing import Literal, Optional

from pydantic import BaseModel


DEFAULT_BACKEND_URL = "https://back.codgoo.com/codgoo/public/api/client/"


class AppConfig(BaseModel):
    backend_driver: Literal["http", "mock"] = "mock"
    backend_api_url: str = DEFAULT_BACKEND_URL
    backend_auth_token: Optional[str] = None
    backend_api_password: Optional[str] = None
    locale: str = "en"
    http_timeout_seconds: float = 15.0
    timezone: str = "America/New_York"
    api_key: Optional[str] = None
    run_scheduler: bool = False
    slots_refresh_minutes: int = 5
    picker_cache_ttl_seconds: int = 300
    obs_enabled: bool = False
    sentry_dsn: Optional[str] = None
    environment: str = "development"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw and raw.isdigit() else default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_config() -> AppConfig:
    driver = os.getenv("BACKEND_DRIVER", "mock").lower()
    if driver not in ("http", "mock"):
        raise ValueError(f"Unsupported BACKEND_DRIVER: {driver}")
    base_url = os.getenv("BACKEND_API_URL", DEFAULT_BACKEND_URL)
    if not base_url.endswith("/"):
        base_url += "/"
    return AppConfig(
        backend_driver=driver,
        backend_api_url=base_url,
        backend_auth_token=os.getenv("BACKEND_AUTH_TOKEN") or None,
        backend_api_password=os.getenv("BACKEND_API_PASSWORD") or None,
        locale=os.getenv("LOCALE", "en"),
        http_timeout_seconds=_float_env("HTTP_TIMEOUT_SECONDS", 15.0),
        timezone=os.getenv("TIMEZONE", "America/New_York"),
        api_key=os.getenv("API_KEY") or None,
        run_scheduler=os.getenv("RUN_SCHEDULER", "0") == "1",
        slots_refresh_minutes=max(1, _int_env("SLOTS_REFRESH_MINUTES", 5)),
        picker_cache_ttl_seconds=_int_env("PICKER_CACHE_TTL_SECONDS", 300),
        obs_enabled=os.getenv("OBS_ENABLED", "false").lower() == "true",
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
        environment=os.getenv("ENVIRONMENT", "development"),
    )
