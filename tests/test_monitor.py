"""Tests for the stop monitor and the polling loop."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from bustracker.errors import NoEtaFound, TransportError
from bustracker.monitor import EventKind, StopMonitor, watch_stop


def _monitor(notify_before: int = 5) -> StopMonitor:
    return StopMonitor(stop="1234", route="7", notify_before=notify_before)


class TestObserve:
    def test_first_reading_never_notifies(self) -> None:
        monitor = _monitor()
        assert monitor.observe(2) == []
        assert monitor.last_eta == 2

    def test_notifies_when_close_and_approaching(self) -> None:
        monitor = _monitor()
        monitor.observe(8)
        events = monitor.observe(4)

        assert [e.kind for e in events] == [EventKind.ARRIVING]
        assert events[0].minutes == 4
        assert events[0].message == "Bus 7 at stop 1234 arriving in 4 minutes!"

    def test_singular_minute(self) -> None:
        monitor = _monitor()
        monitor.observe(3)
        (event,) = monitor.observe(1)
        assert event.message.endswith("arriving in 1 minute!")

    def test_no_notification_above_threshold(self) -> None:
        monitor = _monitor(notify_before=5)
        monitor.observe(9)
        assert monitor.observe(5) == []

    def test_unchanged_eta_is_silent(self) -> None:
        monitor = _monitor()
        monitor.observe(3)
        assert monitor.observe(3) == []
        assert monitor.enabled is True

    def test_growing_eta_means_bus_passed(self) -> None:
        monitor = _monitor()
        monitor.observe(2)
        events = monitor.observe(15)

        assert [e.kind for e in events] == [EventKind.PASSED]
        assert monitor.enabled is False

    def test_disabled_monitor_is_silent(self) -> None:
        monitor = _monitor()
        monitor.enabled = False
        monitor.observe(8)
        assert monitor.observe(2) == []
        assert monitor.last_eta == 2


class TestObserveError:
    def test_error_before_any_eta(self) -> None:
        (event,) = _monitor().observe_error(NoEtaFound())

        assert event.kind is EventKind.ERROR
        assert event.minutes is None
        assert event.message == (
            "Failed to fetch ETA for stop 1234, route 7: No ETA found."
        )

    def test_error_after_eta_carries_minus_one(self) -> None:
        monitor = _monitor()
        monitor.observe(6)
        (event,) = monitor.observe_error(TransportError("down"))
        assert event.minutes == -1

    def test_disabled_monitor_swallows_errors(self) -> None:
        monitor = _monitor()
        monitor.enabled = False
        assert monitor.observe_error(NoEtaFound()) == []


class TestWatchStop:
    async def test_polls_until_bus_passes(self) -> None:
        service = MagicMock()
        service.query_eta = AsyncMock(side_effect=[10, 4, 3, 8, 20])
        sleep = AsyncMock()
        monitor = _monitor()

        seen = [item async for item in watch_stop(service, monitor, 20.0, sleep=sleep)]

        assert [eta for eta, _ in seen] == [10, 4, 3, 8]
        kinds = [[e.kind for e in events] for _, events in seen]
        assert kinds == [[], [EventKind.ARRIVING], [EventKind.ARRIVING], [EventKind.PASSED]]
        assert service.query_eta.await_count == 4
        assert sleep.await_count == 3
        sleep.assert_awaited_with(20.0)

    async def test_max_polls_bounds_loop(self) -> None:
        service = MagicMock()
        service.query_eta = AsyncMock(return_value=12)

        seen = [
            item
            async for item in watch_stop(service, _monitor(), 0.0, max_polls=3, sleep=AsyncMock())
        ]

        assert len(seen) == 3
        service.query_eta.assert_awaited_with("1234", "7")

    async def test_errors_do_not_stop_watching(self) -> None:
        service = MagicMock()
        service.query_eta = AsyncMock(side_effect=[6, NoEtaFound(), 2])

        seen = [
            item
            async for item in watch_stop(service, _monitor(), 0.0, max_polls=3, sleep=AsyncMock())
        ]

        assert seen[1][0] is None
        assert seen[1][1][0].kind is EventKind.ERROR
        assert seen[1][1][0].minutes == -1
        assert seen[2][0] == 2
        assert seen[2][1][0].kind is EventKind.ARRIVING
