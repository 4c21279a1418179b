"""Clock capability injected into the scheduler."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Clock frozen at a given instant until advanced.

    Used for deterministic scheduling in tests and simulations.
    """

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, days: float = 0, **kwargs: float) -> datetime:
        """Move the clock forward and return the new time."""
        self.current = self.current + timedelta(days=days, **kwargs)
        return self.current
