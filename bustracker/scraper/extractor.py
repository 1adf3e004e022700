"""ETA extraction: turns tracker page markup into minutes-until-arrival."""

from __future__ import annotations

import logging
import re

from bustracker.errors import NoEtaFound, RouteNotFound, UnparseableEta
from bustracker.scraper.models import ExtractionOutcome, OutcomeKind

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tracker markup
# ---------------------------------------------------------------------------
ROUTE_LABEL_PATTERN = r'<strong class="larger">#([0-9]+)&nbsp;</strong>'
DUE_LABEL_PATTERN = r'<strong class="larger">DUE</strong>'
MIN_LABEL_PATTERN = r'<strong class="larger">([0-9]+)&nbsp;MIN</strong>'

# A bus flagged DUE is reported as one minute away.
DUE_MINUTES = 1

# ETAs are 32-bit signed integers on the wire; anything larger is garbage.
MAX_MINUTES = 2**31 - 1


class EtaExtractor:
    """Find the ETA of one route in a tracker page.

    Only the first label for the requested route is considered, and only
    markers after that label count, so a neighbouring route's ETA earlier in
    the page is never picked up.
    """

    def __init__(self) -> None:
        self._route_label = re.compile(ROUTE_LABEL_PATTERN)
        self._due_label = re.compile(DUE_LABEL_PATTERN)
        self._min_label = re.compile(MIN_LABEL_PATTERN)

    def classify(self, html: str, route: str) -> ExtractionOutcome:
        """Return the :class:`ExtractionOutcome` for *route* in *html*."""
        found = None
        for m in self._route_label.finditer(html):
            logger.debug("[extract] Found route label: %s", m.group(1))
            if m.group(1) == route:
                found = m
                break

        if found is None:
            return ExtractionOutcome(OutcomeKind.ROUTE_NOT_FOUND, route)

        tail = html[found.end():]

        if self._due_label.search(tail):
            return ExtractionOutcome(OutcomeKind.ARRIVING_NOW, route, DUE_MINUTES)

        minutes = self._min_label.search(tail)
        if minutes is None:
            return ExtractionOutcome(OutcomeKind.NO_ETA_FOUND, route)
        try:
            value = int(minutes.group(1))
        except ValueError:
            return ExtractionOutcome(OutcomeKind.UNPARSEABLE_MINUTES, route)
        if value > MAX_MINUTES:
            return ExtractionOutcome(OutcomeKind.UNPARSEABLE_MINUTES, route)
        return ExtractionOutcome(OutcomeKind.MINUTES_REMAINING, route, value)

    def extract(self, html: str, route: str) -> int:
        """Return minutes until *route* arrives, according to *html*.

        Raises:
            RouteNotFound: No label for *route* in the page.
            NoEtaFound: The route is listed but carries neither DUE nor MIN.
            UnparseableEta: The MIN value does not fit a 32-bit integer.
        """
        outcome = self.classify(html, route)
        if outcome.kind is OutcomeKind.ROUTE_NOT_FOUND:
            raise RouteNotFound(route)
        if outcome.kind is OutcomeKind.NO_ETA_FOUND:
            raise NoEtaFound()
        if (
            outcome.kind in (OutcomeKind.ARRIVING_NOW, OutcomeKind.MINUTES_REMAINING)
            and outcome.minutes is not None
        ):
            return outcome.minutes
        raise UnparseableEta()


_default_extractor = EtaExtractor()


def extract_eta(html: str, route: str) -> int:
    """Module-level shortcut for :meth:`EtaExtractor.extract`."""
    return _default_extractor.extract(html, route)
