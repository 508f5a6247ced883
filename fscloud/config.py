import os
from dataclasses import dataclass
from typing import Optional

from endpoints import BASE_URL

DEFAULT_SESSION_PATH = ".fscloud/session.json"
DEFAULT_HTTP_LOG = "fscloud_http.log"
DEFAULT_DEBOUNCE_MS = 300


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value in ("1", "true", "TRUE")


@dataclass
class Settings:
    base_url: str = BASE_URL
    session_path: str = DEFAULT_SESSION_PATH
    timeout: float = 30.0
    search_debounce_ms: int = DEFAULT_DEBOUNCE_MS
    http_log_path: Optional[str] = None
    debug: bool = False


def load_settings() -> Settings:
    http_log = os.getenv("FSCLOUD_HTTP_LOG")
    if http_log is None:
        http_log = os.path.join(os.getcwd(), DEFAULT_HTTP_LOG)
    return Settings(
        base_url=os.getenv("FSCLOUD_BASE_URL") or BASE_URL,
        session_path=os.getenv("FSCLOUD_SESSION_PATH") or DEFAULT_SESSION_PATH,
        timeout=_env_float("FSCLOUD_TIMEOUT", 30.0),
        search_debounce_ms=_env_int("FSCLOUD_SEARCH_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
        # empty string disables the HTTP log file
        http_log_path=http_log or None,
        debug=_env_bool("FSCLOUD_DEBUG"),
    )
