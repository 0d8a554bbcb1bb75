"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "st2dash.log"

DEFAULT_BACKEND_URL = "ws://127.0.0.1:3012"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_retries(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    if raw.strip().lower() == "none":
        return None
    return _env_int(name, 0 if default is None else default)


@dataclass
class Settings:
    """Runtime settings for a dashboard session."""

    backend_url: str = DEFAULT_BACKEND_URL
    initial_epoch: int = 1
    invariant_poll_interval: float = 5.0
    reconnect_max_retries: int | None = 10
    reconnect_backoff_base: float = 0.5
    reconnect_backoff_max: float = 30.0
    viewport_width: float = 1280.0
    api_host: str = "localhost"
    api_port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ST2_* / API_* environment variables."""
        return cls(
            backend_url=os.getenv("ST2_BACKEND_URL", DEFAULT_BACKEND_URL),
            initial_epoch=_env_int("ST2_INITIAL_EPOCH", 1),
            invariant_poll_interval=_env_float("ST2_INV_POLL_INTERVAL", 5.0),
            reconnect_max_retries=_env_retries("ST2_RECONNECT_MAX_RETRIES", 10),
            reconnect_backoff_base=_env_float("ST2_RECONNECT_BACKOFF_BASE", 0.5),
            reconnect_backoff_max=_env_float("ST2_RECONNECT_BACKOFF_MAX", 30.0),
            viewport_width=_env_float("ST2_VIEWPORT_WIDTH", 1280.0),
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=_env_int("API_PORT", 8000),
        )
