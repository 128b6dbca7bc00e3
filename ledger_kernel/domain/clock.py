"""
Injectable time source.

Services stamp domain events with ``clock.now()`` and the profit & loss
report derives its default calendar year from ``clock.today()``.  Nothing
in the kernel reads the wall clock except ``SystemClock``.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone

DEFAULT_TEST_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Source of the current instant.  ``now()`` is always timezone-aware."""

    @abstractmethod
    def now(self) -> datetime: ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Frozen clock for tests.

    Returns the same instant until moved with ``set_time()``.  Naive
    datetimes are rejected so event timestamps stay comparable.
    """

    def __init__(self, fixed_time: datetime = DEFAULT_TEST_TIME):
        self.set_time(fixed_time)

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        if time.tzinfo is None:
            raise ValueError("DeterministicClock requires a timezone-aware datetime")
        self._current = time
