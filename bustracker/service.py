"""ETA query orchestration: cache → robots gate → fetch → extract → cache.

:class:`EtaService` owns all shared state (the cache and the robots verdict).
One instance is created per process, at API startup or per CLI invocation,
and shared by every concurrent query.

Locks are only ever held inside the cache and gate methods, around plain
dict/attribute access, so no lock is held while a query awaits the network.
"""

from __future__ import annotations

import logging
from typing import Optional

from bustracker.cache import CacheKey, EtaCache
from bustracker.config import Settings, settings as default_settings
from bustracker.errors import EtaError, TransportError
from bustracker.robots import CrawlPermissionGate
from bustracker.scraper.extractor import EtaExtractor
from bustracker.scraper.fetcher import Transport, build_eta_url, fetch_url

logger = logging.getLogger(__name__)


class EtaService:
    """Answers "how many minutes until *route* reaches *stop*"."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
        cache: Optional[EtaCache] = None,
        gate: Optional[CrawlPermissionGate] = None,
        extractor: Optional[EtaExtractor] = None,
    ) -> None:
        # An empty EtaCache is falsy, so injected collaborators are checked
        # against None rather than truthiness.
        self.settings = settings if settings is not None else default_settings
        self.transport = transport if transport is not None else fetch_url
        if cache is None:
            cache = EtaCache(
                ttl_ms=self.settings.cache_ttl_ms,
                lock_timeout=self.settings.lock_timeout,
            )
        self.cache = cache
        if gate is None:
            gate = CrawlPermissionGate(
                robots_url=self.settings.robots_url,
                transport=self.transport,
                lock_timeout=self.settings.lock_timeout,
            )
        self.gate = gate
        self.extractor = extractor if extractor is not None else EtaExtractor()

    async def query_eta(self, stop: str, route: str) -> int:
        """Return minutes until *route* arrives at *stop*.

        Served from the cache when an entry younger than the TTL exists;
        otherwise the tracker page is fetched and parsed.

        Raises:
            PermissionDenied: robots.txt forbids scraping.
            TransportError: The tracker page could not be fetched, or came
                back with a non-2xx status.
            RouteNotFound, NoEtaFound, UnparseableEta: The page had no usable
                ETA for *route*.
            LockAcquisitionFailure: Shared state could not be locked.
        """
        logger.info("[eta] Fetching ETA for stop: %s, route: %s", stop, route)
        key = CacheKey(stop, route)

        cached = self.cache.lookup(key)
        if cached is not None:
            logger.info("[cache] Hit for key: %s-%s", stop, route)
            return cached
        logger.info("[cache] Miss for key: %s-%s", stop, route)

        try:
            eta = await self._fetch_eta(stop, route)
        except EtaError as exc:
            logger.error("[eta] Error fetching ETA: %s", exc)
            raise

        self.cache.store(key, eta)
        logger.debug("[cache] Stored %s min for key: %s-%s", eta, stop, route)
        return eta

    async def _fetch_eta(self, stop: str, route: str) -> int:
        await self.gate.ensure_permitted()

        url = build_eta_url(stop, route, host=self.settings.tracker_host)
        page = await self.transport(url)
        if not page.ok:
            raise TransportError(f"Tracker returned HTTP {page.status_code} for {url}")

        return self.extractor.extract(page.html, route)
