"""
Re-entrancy and de-duplication guards owned by the session engine.
"""

import time
from typing import Callable, Hashable, Optional


class InFlightGuard:
    """
    Single "operation in progress" flag with a safety expiry.

    A holder that never releases (for example because the guarded network
    call hangs) stops blocking new callers once ``timeout`` has elapsed.
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self._timeout = timeout
        self._clock = clock
        self._acquired_at: Optional[float] = None

    @property
    def active(self) -> bool:
        """Whether the guard is currently held and not yet expired."""
        if self._acquired_at is None:
            return False
        if self._clock() - self._acquired_at >= self._timeout:
            self._acquired_at = None
            return False
        return True

    def try_acquire(self) -> bool:
        """Take the guard; returns False if another operation holds it."""
        if self.active:
            return False
        self._acquired_at = self._clock()
        return True

    def release(self) -> None:
        self._acquired_at = None


class OverlapGuard:
    """
    "Operation in progress" flag for operations that may overlap.

    Stays active until every ``acquire()`` has been matched by a
    ``release()``, so the first caller to finish cannot clear it for the
    others.
    """

    def __init__(self):
        self._holders = 0

    @property
    def active(self) -> bool:
        return self._holders > 0

    def acquire(self) -> None:
        self._holders += 1

    def release(self) -> None:
        if self._holders > 0:
            self._holders -= 1


class EventDeduplicator:
    """Drops keys seen within a sliding window."""

    def __init__(self, window: float, clock: Callable[[], float] = time.monotonic):
        self._window = window
        self._clock = clock
        self._seen: dict[Hashable, float] = {}

    def is_duplicate(self, key: Hashable) -> bool:
        """
        Check a key and record it.

        Returns True if the same key was recorded less than ``window``
        seconds ago; otherwise records it and returns False.
        """
        now = self._clock()
        self._seen = {k: t for k, t in self._seen.items() if now - t < self._window}
        if key in self._seen:
            return True
        self._seen[key] = now
        return False

    def clear(self) -> None:
        self._seen.clear()
