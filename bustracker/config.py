"""Centralised settings for the bus ETA service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Upstream tracker
    # ------------------------------------------------------------------
    tracker_host: str = field(
        default_factory=lambda: os.environ.get(
            "TRACKER_HOST", "www.ctabustracker.com/bustime/wireless/html"
        )
    )
    robots_url: str = field(
        default_factory=lambda: os.environ.get(
            "ROBOTS_URL", "https://www.ctabustracker.com/bustime/wireless/robots.txt"
        )
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT", "Mozilla/5.0 (compatible; BusEta/1.0)"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Cache / shared state
    # ------------------------------------------------------------------
    cache_ttl_ms: int = field(
        default_factory=lambda: int(os.environ.get("CACHE_TTL_MS", "1000"))
    )
    lock_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LOCK_TIMEOUT", "5.0"))
    )

    # ------------------------------------------------------------------
    # Stop watcher
    # ------------------------------------------------------------------
    poll_interval: float = field(
        default_factory=lambda: float(os.environ.get("POLL_INTERVAL", "20.0"))
    )
    notify_before: int = field(
        default_factory=lambda: int(os.environ.get("NOTIFY_BEFORE", "5"))
    )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from bustracker.config import settings
settings = Settings()
