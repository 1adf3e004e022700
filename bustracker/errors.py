"""Exceptions raised by the ETA pipeline.

Every failure a caller can see derives from :class:`EtaError`, and
``str(exc)`` is the human-readable message handed back to API and CLI users.
"""

from __future__ import annotations


class EtaError(Exception):
    """Base class for all ETA lookup failures."""


class TransportError(EtaError):
    """The tracker page could not be fetched (network failure or bad status)."""


class PermissionDenied(EtaError):
    """The tracker's robots.txt does not allow us to scrape it."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class RouteNotFound(EtaError):
    def __init__(self, route: str) -> None:
        super().__init__(f"Route {route} not found in response.")
        self.route = route


class NoEtaFound(EtaError):
    def __init__(self) -> None:
        super().__init__("No ETA found.")


class UnparseableEta(EtaError):
    def __init__(self) -> None:
        super().__init__("Cannot parse ETA.")


class LockAcquisitionFailure(EtaError):
    """A shared-state lock could not be acquired within the configured timeout."""
