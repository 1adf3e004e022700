"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int

    @property
    def ok(self) -> bool:
        """``True`` for any 2xx status."""
        return 200 <= self.status_code < 300


class OutcomeKind(str, Enum):
    ARRIVING_NOW = "arriving_now"
    MINUTES_REMAINING = "minutes_remaining"
    ROUTE_NOT_FOUND = "route_not_found"
    NO_ETA_FOUND = "no_eta_found"
    UNPARSEABLE_MINUTES = "unparseable_minutes"


@dataclass(frozen=True)
class ExtractionOutcome:
    """What the extractor found for one route on one tracker page.

    ``minutes`` is set only for ``ARRIVING_NOW`` (always 1) and
    ``MINUTES_REMAINING``.
    """

    kind: OutcomeKind
    route: str
    minutes: Optional[int] = None
