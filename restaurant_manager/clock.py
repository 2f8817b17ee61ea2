"""Operator-controlled clock used by all time-sensitive rules."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable


class VirtualClock:
    """
    A settable "now".

    Starts at the real current time and only moves when told to, so
    reservation coverage and order timestamps can be exercised at any
    instant without waiting on the wall clock.
    """

    def __init__(self, start: datetime | None = None, source: Callable[[], datetime] = datetime.now) -> None:
        self._source = source
        self._now = start if start is not None else source()

    def now(self) -> datetime:
        return self._now

    def set(self, instant: datetime) -> None:
        self._now = instant

    def advance(self, delta: timedelta) -> datetime:
        self._now = self._now + delta
        return self._now

    def reset(self) -> datetime:
        """Snap back to the real current time."""
        self._now = self._source()
        return self._now
