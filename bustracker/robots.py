"""One-shot robots.txt check shared by every ETA query.

The tracker publishes a permissive robots.txt.  We fetch it once per gate,
compare it with the exact body we expect, and remember the verdict for the
rest of the process.  An unreachable or missing robots.txt is not a denial.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bustracker.config import settings
from bustracker.errors import PermissionDenied, TransportError
from bustracker.locks import hold
from bustracker.scraper.fetcher import Transport, fetch_url

logger = logging.getLogger(__name__)

EXPECTED_ROBOTS_TXT = "User-agent: *\nDisallow:"
DENIAL_REASON = "Please check robots.txt manually"


class VerdictState(str, Enum):
    UNCHECKED = "unchecked"
    PERMITTED = "permitted"
    DENIED = "denied"


@dataclass(frozen=True)
class Verdict:
    state: VerdictState
    reason: Optional[str] = None


UNCHECKED = Verdict(VerdictState.UNCHECKED)
PERMITTED = Verdict(VerdictState.PERMITTED)


class CrawlPermissionGate:
    """Memoized crawl-permission check.

    Two callers that arrive before any verdict is recorded may both fetch
    robots.txt.  Checking twice is harmless; the first verdict recorded is
    the one every caller sees from then on.
    """

    def __init__(
        self,
        robots_url: Optional[str] = None,
        transport: Optional[Transport] = None,
        lock_timeout: Optional[float] = None,
    ) -> None:
        self.robots_url = robots_url or settings.robots_url
        self._transport = transport if transport is not None else fetch_url
        self._lock_timeout = settings.lock_timeout if lock_timeout is None else lock_timeout
        self._lock = threading.Lock()
        self._verdict = UNCHECKED

    @property
    def verdict(self) -> Verdict:
        with hold(self._lock, self._lock_timeout, "robots"):
            return self._verdict

    async def ensure_permitted(self) -> None:
        """Return when scraping is allowed.

        Raises:
            PermissionDenied: robots.txt was fetched and differs from the
                expected permissive body.  Raised again, without refetching,
                on every later call.
            LockAcquisitionFailure: The verdict lock timed out.
        """
        verdict = self.verdict
        if verdict.state is VerdictState.UNCHECKED:
            logger.info("[robots] Check not done, fetching %s", self.robots_url)
            checked = await self._check()
            with hold(self._lock, self._lock_timeout, "robots"):
                if self._verdict.state is VerdictState.UNCHECKED:
                    self._verdict = checked
                verdict = self._verdict
        else:
            logger.debug("[robots] Check already done: %s", verdict.state.value)

        if verdict.state is VerdictState.DENIED:
            raise PermissionDenied(verdict.reason or DENIAL_REASON)

    async def _check(self) -> Verdict:
        try:
            page = await self._transport(self.robots_url)
        except TransportError as exc:
            logger.warning("[robots] Fetch failed (%s), assuming crawling is allowed", exc)
            return PERMITTED

        if not page.ok:
            logger.info(
                "[robots] No robots.txt found (status: %s), assuming crawling is allowed",
                page.status_code,
            )
            return PERMITTED

        if page.html != EXPECTED_ROBOTS_TXT:
            logger.warning("[robots] Unexpected robots.txt content, refusing to scrape")
            return Verdict(VerdictState.DENIED, DENIAL_REASON)

        logger.info("[robots] Check passed")
        return PERMITTED
