"""Bounded lock acquisition for the shared cache and permission state."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from bustracker.errors import LockAcquisitionFailure


@contextmanager
def hold(lock: threading.Lock, timeout: float, what: str) -> Iterator[None]:
    """Hold *lock* for the duration of the ``with`` block.

    Critical sections guarded this way must not contain an ``await``.

    Raises:
        LockAcquisitionFailure: If *lock* is not acquired within *timeout*
            seconds.
    """
    if not lock.acquire(timeout=timeout):
        raise LockAcquisitionFailure(f"Failed to acquire {what} lock")
    try:
        yield
    finally:
        lock.release()
