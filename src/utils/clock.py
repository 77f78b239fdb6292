"""Time source abstraction for the in-process caches.

The caches never call ``datetime.now()`` directly; they ask an injected
clock so TTL behaviour can be driven from tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return current UTC datetime."""
        ...


class SystemClock(Clock):
    """Clock returning real system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds between two datetimes."""
    return int((end - start).total_seconds() * 1000)


system_clock = SystemClock()
