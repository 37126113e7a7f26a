"""Environment-driven settings for the dashboard."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "http://localhost:3000"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_FETCH_TIMEOUT = 5.0
DEFAULT_BASE_PRICE = 86300.0


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    return value or default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %s", name, raw, default)
        return default
    return value


@dataclass(frozen=True, slots=True)
class DashboardSettings:
    """Runtime configuration. Build with from_env() in production."""

    backend_url: str = DEFAULT_BACKEND_URL
    push_url: str = ""  # Empty -> timed polling instead of the push channel
    poll_interval: float = DEFAULT_POLL_INTERVAL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    base_price: float = DEFAULT_BASE_PRICE
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> DashboardSettings:
        return cls(
            backend_url=_env_str("BTC_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
            push_url=os.environ.get("BTC_PUSH_URL", "").strip(),
            poll_interval=_env_float("BTC_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            fetch_timeout=_env_float("BTC_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
            base_price=_env_float("BTC_BASE_PRICE", DEFAULT_BASE_PRICE),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            host=_env_str("HOST", "127.0.0.1"),
            port=int(_env_float("PORT", 8000)),
        )
