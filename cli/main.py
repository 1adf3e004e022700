"""Bus ETA CLI — query or watch a stop from the terminal.

Usage:
    python cli/main.py --help

Commands:
    eta     → one-shot lookup of minutes until a route reaches a stop
    watch   → poll a stop and report when the bus gets close
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from bustracker.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import logging
from typing import Optional

import typer

from bustracker.config import settings
from bustracker.errors import EtaError
from bustracker.monitor import EventKind, StopMonitor, watch_stop
from bustracker.service import EtaService

app = typer.Typer(
    name="bus-eta",
    help="Bus tracker ETA lookups.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)


def _format_eta(eta: int) -> str:
    return f"{eta} min"


# ---------------------------------------------------------------------------
# One-shot lookup
# ---------------------------------------------------------------------------
@app.command("eta")
def eta(
    stop: str = typer.Option(..., help="Stop identifier."),
    route: str = typer.Option(..., help="Route number."),
) -> None:
    """Print minutes until ROUTE arrives at STOP."""
    service = EtaService()
    try:
        minutes = asyncio.run(service.query_eta(stop, route))
    except EtaError as exc:
        typer.echo(f"[eta] Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[eta] Route {route} at stop {stop}: {_format_eta(minutes)}")


# ---------------------------------------------------------------------------
# Watcher
# ---------------------------------------------------------------------------
@app.command("watch")
def watch(
    stop: str = typer.Option(..., help="Stop identifier."),
    route: str = typer.Option(..., help="Route number."),
    notify_before: int = typer.Option(
        settings.notify_before, help="Notify when the bus is fewer than this many minutes away."
    ),
    interval: float = typer.Option(settings.poll_interval, help="Seconds between polls."),
    max_polls: Optional[int] = typer.Option(None, help="Stop after this many polls."),
) -> None:
    """Poll STOP for ROUTE until the bus has passed."""
    service = EtaService()
    monitor = StopMonitor(stop=stop, route=route, notify_before=max(1, notify_before))

    async def _run() -> None:
        async for minutes, events in watch_stop(service, monitor, interval, max_polls):
            if minutes is not None:
                typer.echo(f"[watch] Route {route} at stop {stop}: {_format_eta(minutes)}")
            for event in events:
                if event.kind is EventKind.ARRIVING:
                    typer.echo(f"[watch] {event.message}")
                elif event.kind is EventKind.PASSED:
                    typer.echo(f"[watch] Bus {route} has passed stop {stop}, stopping.")
                else:
                    typer.echo(f"[watch] {event.message}", err=True)

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
