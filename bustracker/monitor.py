"""Watch a single stop and report when the bus is about to arrive.

A :class:`StopMonitor` compares each new ETA with the previous one:

* the ETA grows → the bus we were tracking has passed; the monitor disables
  itself and reports ``PASSED``;
* the ETA shrinks below ``notify_before`` minutes → ``ARRIVING``.

Errors are reported while the monitor is enabled.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, List, Optional

from bustracker.errors import EtaError
from bustracker.service import EtaService

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    ARRIVING = "arriving"
    PASSED = "passed"
    ERROR = "error"


@dataclass(frozen=True)
class MonitorEvent:
    kind: EventKind
    stop: str
    route: str
    minutes: Optional[int] = None
    message: str = ""


@dataclass
class StopMonitor:
    stop: str
    route: str
    notify_before: int
    enabled: bool = True
    last_eta: Optional[int] = field(default=None, init=False)

    def observe(self, eta: int) -> List[MonitorEvent]:
        """Record a fresh ETA and return the events it triggers."""
        events: List[MonitorEvent] = []
        previous = self.last_eta

        if self.enabled and previous is not None and eta > previous:
            self.enabled = False
            events.append(MonitorEvent(EventKind.PASSED, self.stop, self.route, eta))

        if self.enabled and previous is not None and eta < previous and eta < self.notify_before:
            events.append(
                MonitorEvent(
                    EventKind.ARRIVING,
                    self.stop,
                    self.route,
                    eta,
                    message=(
                        f"Bus {self.route} at stop {self.stop} arriving in "
                        f"{eta} minute{'' if eta == 1 else 's'}!"
                    ),
                )
            )

        self.last_eta = eta
        return events

    def observe_error(self, exc: Exception) -> List[MonitorEvent]:
        """Return the events a failed lookup triggers.

        Once an ETA has been seen, the error event carries ``minutes=-1``.
        """
        if not self.enabled:
            return []
        minutes = -1 if self.last_eta is not None else None
        return [
            MonitorEvent(
                EventKind.ERROR,
                self.stop,
                self.route,
                minutes,
                message=(
                    f"Failed to fetch ETA for stop {self.stop}, "
                    f"route {self.route}: {exc}"
                ),
            )
        ]


async def watch_stop(
    service: EtaService,
    monitor: StopMonitor,
    interval: float,
    max_polls: Optional[int] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[tuple[Optional[int], List[MonitorEvent]]]:
    """Poll *service* every *interval* seconds, feeding *monitor*.

    Yields ``(eta, events)`` after each poll (``eta`` is ``None`` when the
    lookup failed).  Stops once the monitor disables itself or after
    *max_polls* polls.
    """
    polls = 0
    while monitor.enabled and (max_polls is None or polls < max_polls):
        if polls:
            await sleep(interval)
        polls += 1
        try:
            eta = await service.query_eta(monitor.stop, monitor.route)
        except EtaError as exc:
            yield None, monitor.observe_error(exc)
            continue
        yield eta, monitor.observe(eta)
    logger.debug("[watch] Stopped after %d poll(s)", polls)
