"""HTTP transport for the bus tracker pages."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional
from urllib.parse import quote

import httpx

from bustracker.config import settings
from bustracker.errors import TransportError
from bustracker.scraper.models import RawPage

# Anything that turns a URL into a RawPage can stand in for ``fetch_url``.
Transport = Callable[[str], Awaitable[RawPage]]

_ETA_URL_TEMPLATE = (
    "https://{host}/eta.jsp?route={route}&direction=---&displaydirection=---"
    "&stop={stop}&findstop=on&selectedRtpiFeeds=&id={stop}"
)


def build_eta_url(stop: str, route: str, host: Optional[str] = None) -> str:
    """Return the tracker URL listing arrivals of *route* at *stop*.

    Direction and feed fields are intentionally left blank so the tracker
    returns every direction served at the stop.
    """
    return _ETA_URL_TEMPLATE.format(
        host=host or settings.tracker_host,
        route=quote(route, safe=""),
        stop=quote(stop, safe=""),
    )


async def fetch_url(url: str) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Non-2xx responses are returned as-is; deciding whether a status is fatal
    is left to the caller.

    Raises:
        TransportError: If the request fails before a response is received.
    """
    try:
        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as exc:
        raise TransportError(f"Failed to fetch {url}: {exc}") from exc

    return RawPage(url=url, html=response.text, status_code=response.status_code)
