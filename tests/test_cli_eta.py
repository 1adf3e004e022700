"""Tests for the bus-eta CLI."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from bustracker.errors import RouteNotFound
from cli.main import app

runner = CliRunner()


def _fake_service(**query_kwargs) -> MagicMock:  # type: ignore[no-untyped-def]
    service = MagicMock()
    service.query_eta = AsyncMock(**query_kwargs)
    return service


def test_eta_prints_minutes():
    service = _fake_service(return_value=12)
    with patch("cli.main.EtaService", return_value=service):
        result = runner.invoke(app, ["eta", "--stop", "1234", "--route", "7"])

    assert result.exit_code == 0, result.output
    assert "Route 7 at stop 1234: 12 min" in result.output
    service.query_eta.assert_awaited_once_with("1234", "7")


def test_eta_error_exits_nonzero():
    service = _fake_service(side_effect=RouteNotFound("7"))
    with patch("cli.main.EtaService", return_value=service):
        result = runner.invoke(app, ["eta", "--stop", "1234", "--route", "7"])

    assert result.exit_code == 1
    assert "Route 7 not found in response." in result.output


def test_eta_requires_route():
    result = runner.invoke(app, ["eta", "--stop", "1234"])
    assert result.exit_code != 0


def test_watch_reports_arrival_and_stops_when_passed():
    service = _fake_service(side_effect=[10, 4, 9, 1])
    with patch("cli.main.EtaService", return_value=service):
        result = runner.invoke(
            app,
            ["watch", "--stop", "1234", "--route", "7", "--interval", "0"],
        )

    assert result.exit_code == 0, result.output
    assert "Bus 7 at stop 1234 arriving in 4 minutes!" in result.output
    assert "Bus 7 has passed stop 1234, stopping." in result.output
    assert service.query_eta.await_count == 3


def test_watch_max_polls():
    service = _fake_service(return_value=12)
    with patch("cli.main.EtaService", return_value=service):
        result = runner.invoke(
            app,
            ["watch", "--stop", "1234", "--route", "7", "--interval", "0", "--max-polls", "2"],
        )

    assert result.exit_code == 0, result.output
    assert result.output.count("12 min") == 2


def test_watch_reports_errors():
    service = _fake_service(side_effect=[RouteNotFound("7")])
    with patch("cli.main.EtaService", return_value=service):
        result = runner.invoke(
            app,
            ["watch", "--stop", "1234", "--route", "7", "--interval", "0", "--max-polls", "1"],
        )

    assert result.exit_code == 0, result.output
    assert "Failed to fetch ETA for stop 1234, route 7" in result.output
