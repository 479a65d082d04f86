"""Constants and environment settings for the result-page parser."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TIMEZONE_NAME = "Europe/Berlin"
DEFAULT_CURRENCY = "EUR"

# slugified link texts of the "continue with this offer" anchors
NEXT_STEP_LINK_LABELS = frozenset({
    "ruckfahrt",
    "zur-angebotsauswahl",
    "return",
    "back-to-offer-selection",
})

DEFAULT_BASE_URL = "https://reiseauskunft.bahn.de/bin/query.exe/dn"
HTTP_TIMEOUT_SECONDS = 60
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    base_url: str | None
    http_timeout: float
    log_level: str


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def load_settings() -> Settings:
    """Read settings from the environment (call ``load_dotenv()`` first)."""
    base_url = (os.getenv("BAHN_OFFERS_BASE_URL") or "").strip() or DEFAULT_BASE_URL
    log_level = (os.getenv("BAHN_OFFERS_LOG_LEVEL") or "").strip().upper() or DEFAULT_LOG_LEVEL
    return Settings(
        base_url=base_url,
        http_timeout=_env_float("BAHN_OFFERS_HTTP_TIMEOUT", HTTP_TIMEOUT_SECONDS),
        log_level=log_level,
    )
